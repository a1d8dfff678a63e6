from typing import Tuple

from .schemas import FaceShape, HairstyleEntry

UNSPLASH = "https://images.unsplash.com/"


def _image(photo_id: str) -> str:
    return UNSPLASH + photo_id + "?auto=format&fit=crop&q=80&w=400"


HAIRSTYLES: Tuple[HairstyleEntry, ...] = (
    HairstyleEntry(
        id=1,
        name="Textured Crop",
        description="A modern short haircut with textured layers on top, perfect for adding volume and style.",
        image_url=_image("photo-1622286342621-4bd786c2447c"),
        suitable_for=frozenset({FaceShape.oval, FaceShape.round, FaceShape.square}),
    ),
    HairstyleEntry(
        id=2,
        name="Long Layered Cut",
        description="Flowing layers that add movement and frame the face beautifully.",
        image_url=_image("photo-1605980776566-0486c3ac7617"),
        suitable_for=frozenset({FaceShape.oval, FaceShape.heart, FaceShape.long}),
    ),
    HairstyleEntry(
        id=3,
        name="Classic Side Part",
        description="A timeless style that works well in professional settings.",
        image_url=_image("photo-1621605815971-fbc98d665033"),
        suitable_for=frozenset({FaceShape.square, FaceShape.oval, FaceShape.round}),
    ),
    HairstyleEntry(
        id=4,
        name="Classic Fade",
        description="A timeless cut that works well with most face shapes.",
        image_url=_image("photo-1621605815971-fbc98d665033"),
        suitable_for=frozenset({FaceShape.oval}),
    ),
    HairstyleEntry(
        id=5,
        name="Long Layered",
        description="Ideal for those wanting a longer, flowing style.",
        image_url=_image("photo-1605497788044-5a32c7078486"),
        suitable_for=frozenset({FaceShape.square}),
    ),
)
