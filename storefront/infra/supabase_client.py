from typing import Optional
from supabase import create_client, Client
from storefront import config

_supabase: Optional[Client] = None


def get_supabase() -> Client:
    """
    Client Supabase partagé (clé anon, lecture seule du catalogue).
    Créé au premier appel; RuntimeError si SUPABASE_URL/SUPABASE_KEY manquent.
    """
    global _supabase
    if _supabase is None:
        if not config.SUPABASE_URL or not config.SUPABASE_KEY:
            raise RuntimeError("SUPABASE_URL/SUPABASE_KEY manquants pour get_supabase()")
        _supabase = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    return _supabase
