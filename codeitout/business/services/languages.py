from typing import Optional

# Judge0 CE language ids
JUDGE0_LANGUAGE_IDS = {
    "PYTHON": 71,
    "JAVA": 62,
    "JAVASCRIPT": 63,
    "TYPESCRIPT": 74,
    "C": 50,
    "CPP": 54,
    "C++": 54,
    "CSHARP": 51,
    "GO": 60,
    "RUST": 73,
    "RUBY": 72,
    "KOTLIN": 78,
    "PHP": 68,
    "SWIFT": 83,
}


def get_judge0_language_id(language: str) -> Optional[int]:
    return JUDGE0_LANGUAGE_IDS.get(language.strip().upper())
