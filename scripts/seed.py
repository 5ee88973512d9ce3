"""Seed a development database with an organization, users, walls and events."""
import argparse
import asyncio
import random
import time
from datetime import datetime, timedelta, timezone

from intranet.database import Base, async_session, engine
from intranet.enums import AttendingStatus, WallType
from intranet.models import (
    Comment,
    Event,
    EventOption,
    EventParticipant,
    EventType,
    Office,
    Organization,
    Post,
    PostWatcher,
    User,
    Wall,
)

FIRST_NAMES = ["Ada", "Grace", "Linus", "Margaret", "Ken", "Barbara", "Dennis", "Frances"]
LAST_NAMES = ["Lovelace", "Hopper", "Torvalds", "Hamilton", "Thompson", "Liskov", "Ritchie", "Allen"]
OFFICES = ["Vilnius", "Kaunas", "London"]
EVENT_TYPES = [("Sports", True), ("Workshop", True), ("Team lunch", False)]


async def seed(small: bool = False):
    num_users = 10 if small else 200
    num_posts = 20 if small else 2000
    num_events = 5 if small else 100

    print(f"Seeding: {num_users} users, {num_posts} posts, {num_events} events")
    start = time.perf_counter()
    now = datetime.now(timezone.utc)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        organization = Organization(name="Demo Organization", short_name="demo")
        session.add(organization)
        await session.flush()

        offices = [Office(name=name, organization_id=organization.id) for name in OFFICES]
        event_types = [
            EventType(organization_id=organization.id, name=name, is_shown_with_main_events=main)
            for name, main in EVENT_TYPES
        ]
        session.add_all([*offices, *event_types])

        users = [
            User(
                organization_id=organization.id,
                first_name=random.choice(FIRST_NAMES),
                last_name=random.choice(LAST_NAMES),
                email=f"user_{i:04d}@demo.example.com",
            )
            for i in range(num_users)
        ]
        session.add_all(users)
        main_wall = Wall(organization_id=organization.id, name="Main", type=WallType.MAIN.value)
        session.add(main_wall)
        await session.flush()
        print(f"  Created {len(users)} users, {len(offices)} offices")

        for i in range(num_posts):
            author = random.choice(users)
            post = Post(wall_id=main_wall.id, author_id=author.id, message_body=f"Post {i} by {author.full_name}")
            session.add(post)
            await session.flush()
            watchers = {author.id}
            for _ in range(random.randint(0, 3)):
                commenter = random.choice(users)
                session.add(Comment(post_id=post.id, author_id=commenter.id, message_body="Nice one!"))
                watchers.add(commenter.id)
            session.add_all(PostWatcher(post_id=post.id, user_id=user_id) for user_id in watchers)
        print(f"  Created {num_posts} posts")

        for i in range(num_events):
            start_date = now + timedelta(days=random.randint(-30, 60))
            wall = Wall(organization_id=organization.id, name=f"Event {i}", type=WallType.EVENTS.value)
            session.add(wall)
            await session.flush()
            event = Event(
                organization_id=organization.id,
                event_type_id=random.choice(event_types).id,
                responsible_user_id=random.choice(users).id,
                wall_id=wall.id,
                name=f"Event {i}",
                place=random.choice(OFFICES),
                start_date=start_date,
                end_date=start_date + timedelta(hours=3),
                registration_deadline=start_date - timedelta(days=1),
                max_participants=random.randint(5, 30),
                max_choices=1,
            )
            event.options = [EventOption(option="Pizza"), EventOption(option="Salad")]
            event.offices = random.sample(offices, k=random.randint(0, len(offices)))
            event.participants = [
                EventParticipant(user_id=user.id, attend_status=AttendingStatus.ATTENDING.value)
                for user in random.sample(users, k=min(len(users), random.randint(0, 5)))
            ]
            session.add(event)
        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")


def main():
    parser = argparse.ArgumentParser(description="Seed the intranet database")
    parser.add_argument("--small", action="store_true", help="Use a small dataset")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small))


if __name__ == "__main__":
    main()
