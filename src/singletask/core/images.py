"""Background image descriptor."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Image:
    """A photo plus the attribution the page has to show with it."""

    full_url: str
    regular_url: str
    small_url: str
    html_link: str
    author: str

    @classmethod
    def from_api(cls, data: dict) -> "Image":
        """Create Image from an Unsplash random-photo response."""
        return cls(
            full_url=data["urls"]["full"],
            regular_url=data["urls"]["regular"],
            small_url=data["urls"]["small"],
            html_link=data["links"]["html"],
            author=data["user"]["name"],
        )


_PHOTO = "https://images.unsplash.com/photo-1731453171960-0f8c884c72a4"

STUB_IMAGE = Image(
    full_url=f"{_PHOTO}?crop=entropy&cs=srgb&fm=jpg&q=85",
    regular_url=f"{_PHOTO}?crop=entropy&cs=tinysrgb&fit=max&fm=jpg&q=80&w=1080",
    small_url=f"{_PHOTO}?crop=entropy&cs=tinysrgb&fit=max&fm=jpg&q=80&w=400",
    html_link="https://unsplash.com/photos/a-blurry-photo-of-a-beach-at-sunset-Qn2nubHzL7w",
    author="Adrian Botica",
)
