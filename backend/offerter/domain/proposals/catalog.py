"""Fixed catalogs offered by the proposal form."""

from __future__ import annotations

from typing import Literal, get_args


PropertyType = Literal[
    "Lägenhet",
    "Villa/Radhus",
    "Kontor",
    "Restaurang",
    "Annat",
]

PROPERTY_TYPES: tuple[str, ...] = get_args(PropertyType)

# Trade categories a contractor can quote for.
CATEGORIES: tuple[str, ...] = (
    "Målning Invändigt & Tapeter",
    "Elektriker",
    "Renovering",
    "Badrumsrenovering",
    "Rörmokare",
    "Golvslipning, Olja & Lack",
    "Avfuktning",
    "Balkong",
    "Bergvärmepumpar",
    "Betongarbete",
    "Bredbandsinstallation",
    "Brygga",
    "Bygga altan & uterum",
    "Dörrar",
    "Fasadarbeten",
    "Fasadmålare",
    "Fönster",
    "Garage & Carport",
    "Glasmästare",
    "Golvläggning",
    "Golvvärme",
    "Håltagning",
    "Isolering",
    "Kakelsättare",
    "Kamin & Skorsten",
    "Köksrenovering",
    "Luftvärmepumpar",
    "Låssmed",
    "Maskinuthyrning",
    "Mattläggning",
    "Murare",
    "Möbelmontering",
    "Möbelsnickare",
    "Nybyggnation",
    "Om- & Tillbyggnation",
    "Persienn, Markis & Solfilm",
    "Plåtslagare",
    "Relining",
    "Rivning",
    "Sanerare",
    "Slamsugning & Stamspolning",
    "Solceller",
    "Stambyte",
    "Ställningsbyggare & uthyrning",
    "Svets & Smide",
    "Tak- & Fasadrengöring",
    "Takläggare",
    "Takmålare",
    "Trappor",
    "Undertak & Akustik",
    "Ventilationsfirmor",
    "Vindsrenovering",
    "Värme- och kylsystem",
)

_CATEGORY_SET = frozenset(CATEGORIES)


def is_known_category(value: str) -> bool:
    return value in _CATEGORY_SET
