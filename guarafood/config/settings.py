import os
from dotenv import load_dotenv
from pathlib import Path

# Carrega o .env manualmente se estiver fora do Docker
if not os.getenv("RUNNING_IN_DOCKER"):
    dotenv_path = Path(__file__).resolve().parents[2] / ".env"
    load_dotenv(dotenv_path=dotenv_path)

# Supabase (backend hospedado: catálogo, pedidos, cupons, pagamentos, realtime)
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
SUPABASE_TIMEOUT_SECONDS = int(os.getenv("SUPABASE_TIMEOUT_SECONDS", 20))
SUPABASE_REALTIME_HEARTBEAT_SECONDS = int(os.getenv("SUPABASE_REALTIME_HEARTBEAT_SECONDS", 30))

# Armazenamento local (carrinho, pedidos acompanhados, histórico, perfis, favoritos)
LOCAL_DB_URL = os.getenv("LOCAL_DB_URL", "sqlite:///./guarafood_local.db")

# Fuso usado na avaliação de horário de funcionamento
TIMEZONE = os.getenv("TIMEZONE", "America/Sao_Paulo")

# Checkout
PIX_COUNTDOWN_SECONDS = int(os.getenv("PIX_COUNTDOWN_SECONDS", 300))
DEFAULT_ZIP_CODE = os.getenv("DEFAULT_ZIP_CODE", "37810-000")
ORDER_HISTORY_LIMIT = int(os.getenv("ORDER_HISTORY_LIMIT", 50))
DEFAULT_PAYMENT_METHODS = [
    m.strip()
    for m in os.getenv(
        "DEFAULT_PAYMENT_METHODS",
        "Pix,Cartão de Crédito,Cartão de Débito,Dinheiro,Marcar na minha conta",
    ).split(",")
    if m.strip()
]

# Acompanhamento de pedidos (intervalos de polling em segundos)
TRACKER_POLL_PENDING_SECONDS = int(os.getenv("TRACKER_POLL_PENDING_SECONDS", 10))
TRACKER_POLL_IDLE_SECONDS = int(os.getenv("TRACKER_POLL_IDLE_SECONDS", 30))

# Vitrine: marmitas ficam disponíveis até este horário (HH:MM)
LUNCH_CUTOFF = os.getenv("LUNCH_CUTOFF", "15:30")

# CORS
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
CORS_ALLOW_ALL = os.getenv("CORS_ALLOW_ALL", "false").lower() in ("1", "true", "yes")

# FastAPI / App
ENABLE_DOCS = os.getenv("ENABLE_DOCS", "true").lower() in ("1", "true", "yes")

# Logging
LOG_DIR = Path(os.getenv("LOG_DIR") or Path(__file__).resolve().parents[1] / "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE_MAX_BYTES = int(os.getenv("LOG_FILE_MAX_BYTES", 5 * 1024 * 1024))
LOG_FILE_BACKUP_COUNT = int(os.getenv("LOG_FILE_BACKUP_COUNT", 3))
