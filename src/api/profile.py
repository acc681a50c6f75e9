"""Guest profile endpoint.

There is no authentication; every visitor is shown the same guest
identity with a generated initial avatar.
"""

from urllib.parse import quote

from fastapi import APIRouter

from src.models.schemas import UserProfile

router = APIRouter(prefix="/api", tags=["user"])

GUEST_NAME = "Guest User"
GUEST_EMAIL = "guest@example.com"

_AVATAR_SVG = (
    "<svg xmlns='http://www.w3.org/2000/svg' viewBox='0 0 100 100' width='100' height='100'>"
    "<rect width='100' height='100' fill='#6366f1'/>"
    "<text x='50' y='65' font-family='Arial' font-size='50' font-weight='bold' "
    "text-anchor='middle' fill='white'>{initial}</text></svg>"
)


def avatar_data_url(name: str) -> str:
    """Build an SVG data URL showing the first letter of ``name``."""
    initial = (name.strip()[:1] or "?").upper()
    svg = _AVATAR_SVG.format(initial=initial)
    return "data:image/svg+xml," + quote(svg)


def guest_profile() -> UserProfile:
    return UserProfile(name=GUEST_NAME, email=GUEST_EMAIL, image=avatar_data_url(GUEST_NAME))


@router.get("/user", response_model=UserProfile)
async def get_user() -> UserProfile:
    """Return the guest profile shown next to user messages."""
    return guest_profile()
