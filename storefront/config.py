# storefront.config
from pathlib import Path
import os
from dotenv import load_dotenv

# Calculer le chemin du projet puis charger .env de manière explicite
BASE_DIR = Path(__file__).resolve().parent.parent
ENV_PATH = BASE_DIR / ".env"
load_dotenv(dotenv_path=ENV_PATH, override=True)

PUBLIC_DIR = Path(os.getenv("PUBLIC_DIR") or (BASE_DIR / "public"))
PRODUCTS_DIR = PUBLIC_DIR / "products"
PRECOMPUTED_CACHE_FILE = PUBLIC_DIR / "products-cache.json"

"""
Configuration centrale de la boutique.

- Charge le fichier .env à la racine du projet (BASE_DIR/.env)
- Expose les chemins utiles (PUBLIC_DIR, PRODUCTS_DIR, cache précalculé)
- Normalise et expose les secrets/URLs (Supabase, Stripe, PayPal, Bitcoin)
- Sécurité cookies/session (panier), CORS/hosts
"""

def _clean_env(v: str) -> str:
    """
    Nettoie une valeur d'environnement:
    - supprime les espaces et guillemets (simples, doubles) et backticks
    - retourne toujours une chaîne (jamais None)
    """
    return (v or "").strip().strip("'").strip('"').strip("`")

def _int_env(name: str, default: int) -> int:
    try:
        return int(_clean_env(os.getenv(name) or "") or default)
    except ValueError:
        return default

# Site: origine par défaut pour construire les URLs de retour des paiements
SITE_URL = _clean_env(os.getenv("SITE_URL") or os.getenv("NEXT_PUBLIC_SITE_URL") or "http://localhost:8000").rstrip("/")
SITE_NAME = _clean_env(os.getenv("SITE_NAME") or os.getenv("NEXT_PUBLIC_SITE_NAME") or "Store")

# Supabase: catalogue produits (lecture seule)
SUPABASE_URL = _clean_env(os.getenv("SUPABASE_URL") or "")
SUPABASE_KEY = _clean_env(os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_ANON_KEY") or "")

if SUPABASE_URL and not SUPABASE_URL.startswith("http"):
    SUPABASE_URL = "https://" + SUPABASE_URL
if SUPABASE_URL.endswith("/"):
    SUPABASE_URL = SUPABASE_URL.rstrip("/")

# Stripe: clé secrète (serveur uniquement)
STRIPE_SECRET_KEY = _clean_env(os.getenv("STRIPE_SECRET_KEY") or "")

# PayPal: identifiants OAuth2 (client credentials) et environnement
PAYPAL_CLIENT_ID = _clean_env(os.getenv("PAYPAL_CLIENT_ID") or "")
PAYPAL_CLIENT_SECRET = _clean_env(os.getenv("PAYPAL_CLIENT_SECRET") or "")
PAYPAL_ENV = _clean_env(os.getenv("PAYPAL_ENV") or "sandbox").lower()
PAYPAL_BASE_URL = "https://api-m.paypal.com" if PAYPAL_ENV == "live" else "https://api-m.sandbox.paypal.com"
PAYPAL_TIMEOUT_SECONDS = float(_int_env("PAYPAL_TIMEOUT_SECONDS", 15))

# Bitcoin: adresse statique affichée au client (aucune vérification)
BITCOIN_ADDRESS = _clean_env(os.getenv("BITCOIN_ADDRESS") or os.getenv("NEXT_PUBLIC_BITCOIN_ADDRESS") or "")

# Catalogue: pagination et cache mémoire
PRODUCTS_PAGE_SIZE = _int_env("PRODUCTS_PAGE_SIZE", 6)
PRODUCTS_CACHE_TTL_SECONDS = _int_env("PRODUCTS_CACHE_TTL_SECONDS", 300)

# Cookies / session (le panier vit dans la session signée)
SESSION_SECRET_KEY = _clean_env(os.getenv("SESSION_SECRET_KEY") or "replace_me_with_a_long_random_secret")
COOKIE_SECURE = (os.getenv("COOKIE_SECURE", "false").lower() == "true")

# CORS (dev)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
ALLOWED_HOSTS = [h.strip() for h in os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",") if h.strip()]
