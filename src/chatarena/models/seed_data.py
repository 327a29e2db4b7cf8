"""Seed data for system-controlled combatants.

The roster spans beginner to legendary ratings so new players always have an
opponent near their own strength.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from chatarena.domain.models import SYSTEM_ACCOUNT_ID

from .combatant import Combatant

NPC_ROSTER: tuple[tuple[str, str, int], ...] = (
    # Beginner
    ("초보검사", "검술을 배우고 있어요. 최선을 다하겠습니다!", 500),
    ("견습마법사", "마법의 기초를 익히는 중입니다. 열심히 하겠어요!", 550),
    ("신참모험가", "모험을 시작한 지 얼마 안 됐어요. 잘 부탁드려요!", 600),
    ("수련생", "매일 훈련하고 있습니다. 화이팅!", 650),
    # Intermediate
    ("용병단장", "수많은 전투를 경험했다. 각오해라!", 700),
    ("숙련검객", "검의 길을 걷는 자, 승부를 걸어라!", 720),
    ("원소술사", "자연의 힘을 다루는 자다. 준비되었나?", 750),
    ("그림자암살자", "어둠 속에서 기다리고 있었다...", 780),
    # Advanced
    ("대마법사", "마법의 정수를 보여주겠다. 각오는 되었나?", 800),
    ("검성", "천 번의 싸움에서 단 한 번도 지지 않았다.", 830),
    ("드래곤나이트", "용의 힘과 함께한다. 두려워하라!", 860),
    ("전설의용사", "수많은 악을 물리친 전설이다. 도전하겠나?", 900),
    # Elite
    ("시공술사", "시간과 공간을 다스리는 자, 운명을 받아들여라.", 900),
    ("천상의기사", "신의 축복을 받은 자다. 정의의 심판을 받아라!", 950),
    ("마왕", "어둠의 지배자다. 절망하라!", 1000),
    ("고대의현자", "천년의 지혜로 너를 심판하겠다.", 1050),
    # Legendary
    ("신", "신의 영역에 도전하는가? 흥미롭군.", 1050),
    ("창조자", "모든 것의 시작이자 끝이다. 각오는 되었나?", 1100),
    ("운명의수호자", "운명의 실을 조종한다. 너의 운명은 이미 정해졌다.", 1175),
    ("무한의존재", "시작도 끝도 없는 존재. 영원을 마주할 준비는 되었나?", 1250),
)


def seed_npc_combatants(session: Session) -> int:
    """Insert any roster NPCs that are not stored yet.

    Args:
        session: SQLAlchemy session to use for database operations

    Returns:
        Number of combatants created
    """
    existing = set(
        session.scalars(
            select(Combatant.name).where(Combatant.owner_account_id == SYSTEM_ACCOUNT_ID)
        )
    )

    created = 0
    for name, battle_text, rating in NPC_ROSTER:
        if name in existing:
            continue
        session.add(
            Combatant(
                name=name,
                owner_account_id=SYSTEM_ACCOUNT_ID,
                rating=rating,
                battle_text=battle_text,
                is_system_controlled=True,
            )
        )
        created += 1

    session.commit()
    return created
