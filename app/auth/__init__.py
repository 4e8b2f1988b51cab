"""Bearer-token session handling and Google OAuth account linking."""
