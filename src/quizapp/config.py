import os

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))


class Settings:
    PROJECT_NAME: str = "quizapp"
    DEBUG: bool = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "quizapp.log"
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")
    # Oracle
    ANSWER_KEY_FILE: str = os.environ.get("ANSWER_KEY_FILE", "data/answers.csv")
    CORS_ORIGINS: list = ["*"]
    # Client
    ORACLE_URL: str = os.environ.get("ORACLE_URL", "http://localhost:3000")
    ORACLE_TIMEOUT_SECONDS: float = float(os.environ.get("ORACLE_TIMEOUT_SECONDS", "5"))
    QUESTIONS_FILE: str = os.environ.get("QUESTIONS_FILE", "data/questions.csv")
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = 120
    TEMPLATES_DIR: str = os.path.join(PACKAGE_DIR, "templates")
    STATIC_DIR: str = os.path.join(PACKAGE_DIR, "static")


settings = Settings()
