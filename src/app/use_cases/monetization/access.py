"""Actor checks shared by monetization use cases"""

from typing import Optional
from .dtos import ActorDTO


def owns_artist(artist_user_id: Optional[str], actor: ActorDTO) -> bool:
    """Admins, or the user behind the artist"""
    return actor.is_admin or (artist_user_id is not None and artist_user_id == actor.user_id)
