"""
Material kinds tracked as stock counters on production houses and as moved
quantities on ledger records.
"""

from app import db


MATERIAL_KINDS = (
    'film_white',
    'film_blue',
    'patti_role',
    'angle_board_24',
    'angle_board_32',
    'angle_board_36',
    'angle_board_39',
    'angle_board_48',
    'cap_hit',
    'cap_simple',
    'firmshit',
    'thermocol',
    'mettle_angle',
    'black_cover',
    'packing_clip',
    'patiya',
    'plypatia',
)


# Largest amount a quantity column holds (signed 32-bit INTEGER)
MAX_QUANTITY = 2**31 - 1


def material_label(kind):
    """Human-readable name of a material kind ("angle_board_24" -> "angle board 24")"""
    return kind.replace('_', ' ')


class MaterialQuantitiesMixin:
    """One non-null integer column per material kind, all defaulting to 0"""

    film_white = db.Column(db.Integer, nullable=False, default=0)
    film_blue = db.Column(db.Integer, nullable=False, default=0)
    patti_role = db.Column(db.Integer, nullable=False, default=0)
    angle_board_24 = db.Column(db.Integer, nullable=False, default=0)
    angle_board_32 = db.Column(db.Integer, nullable=False, default=0)
    angle_board_36 = db.Column(db.Integer, nullable=False, default=0)
    angle_board_39 = db.Column(db.Integer, nullable=False, default=0)
    angle_board_48 = db.Column(db.Integer, nullable=False, default=0)
    cap_hit = db.Column(db.Integer, nullable=False, default=0)
    cap_simple = db.Column(db.Integer, nullable=False, default=0)
    firmshit = db.Column(db.Integer, nullable=False, default=0)
    thermocol = db.Column(db.Integer, nullable=False, default=0)
    mettle_angle = db.Column(db.Integer, nullable=False, default=0)
    black_cover = db.Column(db.Integer, nullable=False, default=0)
    packing_clip = db.Column(db.Integer, nullable=False, default=0)
    patiya = db.Column(db.Integer, nullable=False, default=0)
    plypatia = db.Column(db.Integer, nullable=False, default=0)

    def material_quantities(self):
        """Current values as {kind: int}, in MATERIAL_KINDS order"""
        return {kind: int(getattr(self, kind) or 0) for kind in MATERIAL_KINDS}
