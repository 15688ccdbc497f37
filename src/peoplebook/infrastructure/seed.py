"""Sample people written into an empty JSON store on first start."""

import random

from peoplebook.domain import Person

FIRST_NAMES = [
    "Arne", "Berta", "Cord", "Dagmar", "Ernst", "Frieda", "Günter", "Hanna",
    "Ingo", "Johanna", "Klaus", "Luise", "Martin", "Nadja", "Otto", "Patrizia",
    "Quirin", "Rebecca", "Stefan", "Tanja", "Uwe", "Veronika", "Walter",
    "Xaver", "Yvonne", "Zoe",
]
LAST_NAMES = [
    "Arndt", "Bauer", "Conrad", "Diehl", "Engel", "Fischer", "Graf",
    "Hoffmann", "Imhof", "Jung", "Klein", "Lang", "Meier", "Neumann",
    "Olbrich", "Peters", "Quart", "Richter", "Schmidt", "Thiele", "Ulrich",
    "Vogel", "Wagner", "Xander", "Yakov", "Zander",
]
EMAIL_DOMAINS = ["gmail.com", "gmx.de", "t-online.de", "icloud.com", "outlook.com", "web.de"]
# Valid German mobile prefixes; the rest of the number is random.
PHONE_PREFIXES = ["0151", "0160", "0170", "0171", "0175", "0176"]
IMAGE_PATHS = [f"images/people/person_{n:02d}.jpg" for n in range(1, 11)]


def _ascii(name: str) -> str:
    return (
        name.lower()
        .replace("ä", "ae")
        .replace("ö", "oe")
        .replace("ü", "ue")
        .replace("ß", "ss")
    )


class Seed:
    """Deterministic sample data. Same rng_seed -> same people (ids included)."""

    def __init__(self, count: int = 26, rng_seed: int = 42) -> None:
        if count < 0:
            raise ValueError("Seed count must not be negative.")
        self.count = count
        self.rng_seed = rng_seed

    def people(self) -> list[Person]:
        rng = random.Random(self.rng_seed)
        out = []
        for index in range(self.count):
            first_name = FIRST_NAMES[index % len(FIRST_NAMES)]
            last_name = rng.choice(LAST_NAMES)
            email = (
                f"{_ascii(first_name)}.{_ascii(last_name)}@{rng.choice(EMAIL_DOMAINS)}"
            )
            phone = rng.choice(PHONE_PREFIXES) + " " + "".join(
                str(rng.randint(0, 9)) for _ in range(8)
            )
            image_path = IMAGE_PATHS[index] if index < len(IMAGE_PATHS) else None
            out.append(
                Person(
                    id="%08x-%04x-4%03x-a%03x-%012x"
                    % (
                        rng.getrandbits(32),
                        rng.getrandbits(16),
                        rng.getrandbits(12),
                        rng.getrandbits(12),
                        rng.getrandbits(48),
                    ),
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    phone=phone,
                    image_path=image_path,
                )
            )
        return out
