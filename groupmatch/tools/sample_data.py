"""Synthetic candidate pool for demos, simulations and tests.

The generator is deterministic for a given seed. It starts from three
hand-written users and fills the rest from per-ethnicity name pools, then
tops up attendance so every catalog activity has enough attendees to form
groups.
"""

from __future__ import annotations

import random
from typing import Optional

from groupmatch.models import User
from groupmatch.utils.logging_config import logger

ACTIVITIES: tuple[str, ...] = (
    "Hiking", "Pickleball", "Bowling", "Mini Golf", "Boba", "Movie",
    "Karaoke", "Dessert", "Cooking Class", "Theme Park",
    "Museum", "Yoga", "Coffee", "Brunch", "Golf",
    "Snowboarding", "Paddleboarding", "Apple Picking",
)
PREMIUM_ACTIVITIES: frozenset[str] = frozenset(
    {"Snowboarding", "Paddleboarding", "Apple Picking"}
)

ETHNICITIES = ("Caucasian", "Asian", "African American", "Hispanic", "Native American")
GENDERS = ("Male", "Female")

COMMON_LAST = (
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Miller", "Davis", "Wilson",
    "Anderson", "Taylor", "Moore", "Jackson", "Martin", "Thompson", "White",
    "Harris", "Clark", "Lewis", "Walker", "Hall",
)
ASIAN_LAST = (
    "Kim", "Lee", "Park", "Nguyen", "Tran", "Wong", "Chen", "Liu", "Zhang",
    "Yamamoto", "Sato", "Tanaka", "Khan", "Singh", "Patel",
)
HISPANIC_LAST = (
    "Garcia", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Perez", "Sanchez",
    "Ramirez", "Torres", "Flores", "Diaz", "Cruz", "Reyes", "Morales", "Ortiz",
)
NATIVE_LAST = (
    "Begay", "Yazzie", "Tallbear", "LoneWolf", "Goodshield", "Redbird",
    "Blackwater", "Whitefeather", "TwoFeathers", "Runningdeer",
)

# (male first names, female first names, last names) per ethnicity.
NAME_POOLS: dict[str, tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]] = {
    "Caucasian": (
        ("James", "John", "Robert", "Michael", "William", "Thomas", "Charles",
         "Matthew", "Andrew", "Daniel", "David", "Joseph", "Christopher",
         "Anthony", "Brian", "Gregory", "Patrick", "Jason", "Stephen", "Eric"),
        ("Elizabeth", "Jennifer", "Patricia", "Linda", "Barbara", "Emily",
         "Hannah", "Sarah", "Samantha", "Jessica", "Lauren", "Nicole", "Rebecca",
         "Victoria", "Amy", "Katherine", "Rachel", "Allison", "Stephanie", "Julia"),
        COMMON_LAST,
    ),
    "Asian": (
        ("Hiro", "Yuki", "Kenji", "Qiang", "Lei", "Anil", "Ravi", "Akira", "Sora",
         "Tao", "Min", "Jiho", "Soo", "Jin", "Daichi", "Haruto", "Wei", "Joon",
         "Arun", "Takeshi"),
        ("Aiko", "Mei", "Naoko", "Rina", "Hana", "Priya", "Yuna", "Suki", "Keiko",
         "Ling", "Sora", "Minji", "Eunji", "Mika", "Aya", "Nari", "Hyejin", "Sana",
         "Hitomi", "Yuri"),
        ASIAN_LAST,
    ),
    "African American": (
        ("Marcus", "Darius", "Malik", "Jamal", "Tyrone", "Andre", "Xavier", "Jalen",
         "Micah", "DeAndre", "Malachi", "Terrence", "Dominique", "Corey",
         "Kendrick", "Jerome", "Desmond", "Quentin", "Derrick", "Lamar"),
        ("Aaliyah", "Imani", "Nia", "Aisha", "Kenya", "Deja", "Latoya", "Monique",
         "Destiny", "Trinity", "Tiana", "Kiara", "Serenity", "Makayla", "Tanesha",
         "Jasmine", "Arielle", "Zaria", "Lanaya", "Tamera"),
        COMMON_LAST,
    ),
    "Hispanic": (
        ("Alejandro", "Diego", "Carlos", "Miguel", "Luis", "Mateo", "Santiago",
         "Juan", "Felipe", "Andres", "Javier", "Ricardo", "Rafael", "Emilio",
         "Hector", "Pablo", "Ramon", "Tomas", "Nicolas", "Marco"),
        ("Sofia", "Isabella", "Camila", "Valentina", "Lucia", "Mariana", "Elena",
         "Gabriela", "Emilia", "Renata", "Daniela", "Paula", "Ximena", "Romina",
         "Adriana", "Carolina", "Fernanda", "Bianca", "Victoria", "Claudia"),
        HISPANIC_LAST,
    ),
    "Native American": (
        ("Aaron", "Brian", "Eric", "Kevin", "Jason", "Scott", "Timothy", "Steven",
         "Derek", "Nathan", "Zachary", "Trevor", "Shawn", "Logan", "Connor",
         "Ethan", "Cameron", "Jared", "Tyler", "Bryce"),
        ("Ashley", "Rachel", "Lauren", "Megan", "Nicole", "Amber", "Crystal",
         "Brittany", "Heather", "Melissa", "Brooke", "Courtney", "Kayla", "Paige",
         "Danielle", "Erin", "Kelsey", "Sabrina", "Tiffany", "Whitney"),
        NATIVE_LAST,
    ),
}

MBTI_TYPES = (
    "ENFP", "ISTJ", "INFJ", "ENTP", "ISFJ", "INTP", "ESFP", "ESTJ", "ENFJ",
    "ISTP", "INFP", "ESTP", "ENTJ", "ESFJ", "INTJ",
)
VIBES = ("Chill", "Casual", "Party")
RELIGIONS = (
    "Christian", "Catholic", "Muslim", "Jewish", "Hindu", "Buddhist", "Atheist",
    "Agnostic", "Spiritual", "None",
)
BADGES = (
    "Planner Pro", "Team Player", "Cool", "Life of the Party", "Wingman",
    "Best Friend Material", "Early Bird", "Night Owl", "Icebreaker",
)

# Not every city here is in the geo table; those users score a neutral distance.
CITIES = (
    "Los Angeles", "San Diego", "San Jose", "San Francisco", "Fresno", "Sacramento",
    "Long Beach", "Oakland", "Bakersfield", "Anaheim", "Riverside", "Stockton",
    "Irvine", "Chula Vista", "Fremont", "San Bernardino", "Modesto", "Oxnard",
    "Fontana", "Moreno Valley", "Huntington Beach", "Glendale", "Santa Clarita",
    "Garden Grove", "Santa Rosa", "Oceanside", "Rancho Cucamonga", "Ontario",
    "Elk Grove", "Corona", "Lancaster", "Palmdale", "Salinas", "Hayward", "Pomona",
    "Escondido", "Sunnyvale", "Torrance", "Pasadena", "Orange", "Fullerton",
    "Visalia", "Roseville", "Concord", "Thousand Oaks", "Simi Valley", "Vallejo",
    "Berkeley", "Santa Clara", "Carlsbad", "Fairfield", "Temecula", "Clovis",
    "Murrieta", "El Monte", "Antioch", "Ventura", "Richmond", "Costa Mesa",
    "West Covina", "Santa Maria", "Norwalk", "Daly City", "Burbank", "San Mateo",
    "Rialto", "El Cajon", "Vista", "Vacaville", "San Marcos", "Compton", "Hesperia",
    "Mission Viejo", "South Gate", "Carson", "Santa Monica", "Westminster",
    "Redding", "Santa Barbara", "Chico", "Whittier", "Newport Beach", "Hawthorne",
    "San Leandro", "San Rafael", "Mountain View", "Upland", "Turlock",
    "Fountain Valley", "Livermore", "Tracy", "Merced", "Chino", "Redwood City",
    "Hemet", "Lake Forest", "Napa", "Indio", "Menifee", "Arcadia",
)


def seed_users() -> list[User]:
    """The hand-written starter users."""

    return [
        User(
            id="seed-alice",
            name="Alice",
            age=28,
            gender="Female",
            mbti="ENFP",
            vibe="Chill",
            ethnicity="Asian",
            religion="Christian",
            city="Los Angeles",
            badges=("Planner Pro", "Team Player"),
            attendance_rating=4.8,
            attendance=("Hiking", "Boba"),
            photo_name="alice",
        ),
        User(
            id="seed-bob",
            name="Bob",
            age=32,
            gender="Male",
            mbti="ISTJ",
            vibe="Casual",
            ethnicity="Caucasian",
            religion="Atheist",
            city="San Diego",
            badges=("Cool",),
            attendance_rating=4.5,
            attendance=("Bowling", "Movie"),
            photo_name="bob",
        ),
        User(
            id="seed-carol",
            name="Carol",
            age=25,
            gender="Female",
            mbti="INFJ",
            vibe="Party",
            ethnicity="Hispanic",
            religion="Catholic",
            city="Irvine",
            badges=("Life of the Party",),
            attendance_rating=4.9,
            attendance=("Karaoke", "Theme Park"),
            photo_name="carol",
        ),
    ]


def random_name(ethnicity: str, gender: str, rng: random.Random) -> str:
    male, female, last = NAME_POOLS.get(ethnicity, (("Alex",), ("Alex",), ("Doe",)))
    first = rng.choice(male if gender == "Male" else female)
    return f"{first} {rng.choice(last)}"


def _random_attendance(rng: random.Random) -> list[str]:
    attendance = rng.sample(ACTIVITIES, rng.randint(1, 4))
    # A lone premium activity always gets a regular one alongside it.
    if len(attendance) == 1 and attendance[0] in PREMIUM_ACTIVITIES:
        attendance.append(rng.choice([a for a in ACTIVITIES if a != attendance[0]]))
    return attendance


def random_user(index: int, rng: random.Random) -> User:
    ethnicity = rng.choice(ETHNICITIES)
    gender = rng.choice(GENDERS)
    return User(
        id=f"sample-{index:04d}",
        name=random_name(ethnicity, gender, rng),
        age=rng.randint(18, 75),
        gender=gender,
        mbti=rng.choice(MBTI_TYPES),
        vibe=rng.choice(VIBES),
        ethnicity=ethnicity,
        religion=rng.choice(RELIGIONS),
        city=rng.choice(CITIES),
        badges=tuple(rng.sample(BADGES, rng.randint(0, 3))),
        attendance_rating=round(rng.uniform(3.0, 5.0), 2),
        attendance=tuple(_random_attendance(rng)),
    )


def attendee_count(users: list[User], activity: str) -> int:
    wanted = activity.casefold()
    return sum(
        1 for user in users if any(a.casefold() == wanted for a in user.attendance)
    )


def ensure_coverage(
    users: list[User],
    activities: tuple[str, ...],
    min_per_activity: int,
    rng: random.Random,
) -> list[User]:
    """Return a copy of ``users`` where each activity has enough attendees.

    Users are picked at random and get the activity appended to their
    attendance until the minimum is met (or everyone has it).
    """

    covered = list(users)
    if not covered or min_per_activity <= 0:
        return covered

    for activity in activities:
        current = attendee_count(covered, activity)
        if current >= min_per_activity:
            continue

        wanted = activity.casefold()
        indices = list(range(len(covered)))
        rng.shuffle(indices)
        for i in indices:
            user = covered[i]
            if any(a.casefold() == wanted for a in user.attendance):
                continue
            covered[i] = user.model_copy(
                update={"attendance": (*user.attendance, activity)}
            )
            current += 1
            if current >= min_per_activity:
                break

    return covered


def generate_sample_users(
    count: int = 500,
    seed: Optional[int] = None,
    min_per_activity: int = 60,
) -> list[User]:
    """Build a synthetic pool of ``count`` users (never fewer than the seeds)."""

    rng = random.Random(seed)
    users = seed_users()
    while len(users) < count:
        users.append(random_user(len(users), rng))

    users = ensure_coverage(users, ACTIVITIES, min_per_activity, rng)
    logger.debug("generate_sample_users count=%s seed=%s", len(users), seed)
    return users
