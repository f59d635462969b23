from .views import Target, canonicalize_url, conversation_id_from_url, conversation_url

__all__ = ['Target', 'canonicalize_url', 'conversation_id_from_url', 'conversation_url']
