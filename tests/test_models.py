"""Tests for database models."""

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import User, Chat, ChatMessage, ContestSubmission, DEFAULT_CHAT_TITLE


class TestUser:
    def test_password_hashing(self, db):
        user = User(username='bob', email='bob@example.com')
        user.set_password('hunter2')
        assert user.password_hash != 'hunter2'
        assert user.check_password('hunter2')
        assert not user.check_password('wrong')

    def test_oauth_only_user_has_no_password(self, db):
        user = User(username='g', email='g@example.com', google_id='g-1', is_google_auth=True)
        db.session.add(user)
        db.session.commit()
        assert user.password_hash is None
        assert not user.check_password('')

    def test_email_unique(self, db, make_user):
        make_user(username='one', email='same@example.com')
        with pytest.raises(IntegrityError):
            make_user(username='two', email='same@example.com')

    def test_to_dict_excludes_password(self, db, make_user):
        user = db.session.get(User, make_user(contest_level='Expert'))
        data = user.to_dict()
        assert data['username'] == 'alice'
        assert data['contestLevel'] == 'Expert'
        assert 'password_hash' not in data


class TestChat:
    def test_default_title(self, db, user_id):
        chat = Chat(user_id=user_id)
        db.session.add(chat)
        db.session.commit()
        assert chat.title == DEFAULT_CHAT_TITLE
        assert chat.has_placeholder_title

    def test_messages_keep_insertion_order(self, db, user_id):
        chat = Chat(user_id=user_id)
        db.session.add(chat)
        db.session.flush()
        for i in range(5):
            chat.messages.append(ChatMessage(role='user' if i % 2 == 0 else 'assistant',
                                             content=f'm{i}'))
        db.session.commit()
        db.session.expire_all()
        chat = db.session.get(Chat, chat.id)
        assert [m.content for m in chat.messages] == ['m0', 'm1', 'm2', 'm3', 'm4']

    def test_delete_cascades_messages(self, db, user_id):
        chat = Chat(user_id=user_id)
        chat.messages.append(ChatMessage(role='user', content='hi'))
        db.session.add(chat)
        db.session.commit()
        db.session.delete(chat)
        db.session.commit()
        assert ChatMessage.query.count() == 0


class TestContestSubmission:
    def test_test_cases_round_trip_through_json(self, db, user_id):
        sub = ContestSubmission(user_id=user_id, problem_title='Two Sum')
        sub.test_cases = [{'input': '1 2', 'expectedOutput': '3', 'isHidden': False}]
        db.session.add(sub)
        db.session.commit()
        assert sub.test_cases[0]['expectedOutput'] == '3'
        assert sub.attempts == 1
        assert sub.solved is False

    def test_bad_json_yields_empty_list(self, db, user_id):
        sub = ContestSubmission(user_id=user_id, problem_title='X', test_cases_json='{oops')
        assert sub.test_cases == []

    def test_one_row_per_user_and_title(self, db, user_id):
        db.session.add(ContestSubmission(user_id=user_id, problem_title='Dup'))
        db.session.commit()
        db.session.add(ContestSubmission(user_id=user_id, problem_title='Dup'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()
