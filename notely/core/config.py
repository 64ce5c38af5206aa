from os import getenv


def _unquote(value: str) -> str:
    # les valeurs copiées depuis un .env arrivent parfois entre guillemets
    return value.strip().strip('"')


class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://notely:notely@db:5432/notely")

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "15"))  #expire au bout de 15 minutes
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  #expire au bout d'1 mois

    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    # "keep": un item restauré garde son ancienne position (peut créer un doublon)
    # "append": un item restauré est placé à la fin des items actifs
    RESTORE_POLICY = getenv("RESTORE_POLICY", "keep")

    # Stockage des médias: "local" ou "cloudinary"
    STORAGE_BACKEND = getenv("STORAGE_BACKEND", "local")
    UPLOAD_DIR = getenv("UPLOAD_DIR", "./uploads")
    UPLOAD_BASE_URL = getenv("UPLOAD_BASE_URL", "/uploads")
    UPLOAD_FOLDER = getenv("UPLOAD_FOLDER", "notely")
    MAX_UPLOAD_SIZE = int(getenv("MAX_UPLOAD_SIZE", str(10 * 1024 * 1024)))  # 10MB

    CLOUDINARY_CLOUD_NAME = _unquote(getenv("CLOUDINARY_CLOUD_NAME", ""))
    CLOUDINARY_API_KEY = _unquote(getenv("CLOUDINARY_API_KEY", ""))
    CLOUDINARY_API_SECRET = _unquote(getenv("CLOUDINARY_API_SECRET", ""))

settings = Settings()
