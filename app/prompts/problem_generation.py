"""
Prompt template for generating a contest problem.

Asks the LLM for a single strict-JSON object holding the statement, test
cases (some hidden) and per-language starter code.
"""
from __future__ import annotations

_STARTER_CODE_EXAMPLE = '''{
    "python": "# Read input\\n# Write your solution here\\n# Print output\\n",
    "javascript": "// Read input\\n// Write your solution here\\n// Print output\\n",
    "cpp": "#include <iostream>\\nusing namespace std;\\n\\nint main() {\\n    // Read input\\n    // Write your solution here\\n    // Print output\\n    return 0;\\n}",
    "java": "import java.util.*;\\n\\npublic class Main {\\n    public static void main(String[] args) {\\n        Scanner sc = new Scanner(System.in);\\n        // Read input\\n        // Write your solution here\\n        // Print output\\n    }\\n}"
  }'''


def build_problem_generation_prompt(
    difficulty: str,
    topic: str,
    excluded_titles: list[str] | None = None,
) -> list[dict]:
    """Build prompt messages for problem generation.

    Args:
        difficulty: Contest level (Beginner, Intermediate, Expert).
        topic: DSA topic the problem should exercise.
        excluded_titles: Titles the user already attempted at this
            difficulty and topic; the model is told not to repeat them.

    Returns:
        List of message dicts for LLM chat API.
    """
    exclusion = ''
    if excluded_titles:
        listed = '\n'.join(f'{i}. {t}' for i, t in enumerate(excluded_titles, 1))
        exclusion = (
            '\n\nIMPORTANT: The user has already attempted the following problems. '
            f'DO NOT generate any of these problems again:\n{listed}\n\n'
            'Generate a COMPLETELY DIFFERENT problem that is NOT in the above list.'
        )

    return [
        {
            "role": "user",
            "content": f"""Generate a {difficulty} level DSA problem on the topic: {topic}.{exclusion}

Please provide the response in the following JSON format (make sure it's valid JSON):
{{
  "title": "Problem Title",
  "description": "Detailed problem description. DO NOT include examples in the description - they will be shown separately. Use PLAIN TEXT only - no markdown symbols. Explain the problem clearly, specify input format, output format, and constraints.",
  "difficulty": "{difficulty}",
  "topic": "{topic}",
  "testCases": [
    {{"input": "test input 1", "expectedOutput": "expected output 1", "isHidden": false}},
    {{"input": "test input 2", "expectedOutput": "expected output 2", "isHidden": false}},
    {{"input": "test input 3", "expectedOutput": "expected output 3", "isHidden": true}}
  ],
  "starterCode": {_STARTER_CODE_EXAMPLE}
}}

IMPORTANT:
- Use PLAIN TEXT in the description - NO markdown formatting symbols
- DO NOT include example test cases in the description - they will be displayed separately below
- Make the problem clear and well-defined
- Test cases should have simple input/output (numbers, strings, arrays as space-separated values)
- Clearly specify input format, output format, and constraints in the description
- Output should be a single line
- Make sure the problem is appropriate for {difficulty} level and focuses on {topic}""",
        }
    ]
