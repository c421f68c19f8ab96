"""Global pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from logging import Logger
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio

from fixturedb import Environment, Settings, setup_test_logging
from fixturedb.database import Database, FixtureProvisioner

# Shopify fixture layout: category id -> (title, number of apps 1..n in it)
CATEGORY_SIZES = {
    1: ("Store design", 1193),
    2: ("Sales and conversion optimization", 723),
    3: ("Marketing", 629),
    4: ("Reporting", 100),
}

# pricing plan id -> (price, apps 1..n subscribed)
PRICING_PLAN_SIZES = {
    1: ("Free", 1000),
    2: ("0", 1112),
    3: ("$9.99/month", 223),
    4: ("$5/month", 135),
    5: ("$10/month", 113),
    6: ("$4.99/month", 300),
    7: ("$15/month", 400),
    8: ("Free plan available", 40),
    9: ("$7/month", 50),
}

APP_COUNT = 1500

# Movies fixture layout: director -> budgets of the movies they directed
DIRECTOR_BUDGETS = {
    "Ridley Scott": [200_000_000, 300_000_000, 197_900_000],
    "Christopher Nolan": [250_000_000, 260_000_000],
    "Michael Bay": [500_000_000],
    "Greta Gerwig": [100_000_000],
}


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from fixturedb import get_logger

    return get_logger("test")


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path using pytest's tmp_path."""
    return tmp_path / "test.db"


@pytest.fixture
def database(temp_db_path: Path) -> Database:
    """Facade over an empty temporary database."""
    return Database(temp_db_path)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Testing settings with stages under a temporary directory."""
    return Settings(
        environment=Environment.TESTING,
        stage_dir=tmp_path / "stages",
        query_timeout=5.0,
        busy_timeout=1.0,
    )


@pytest.fixture
def provisioner(settings: Settings) -> FixtureProvisioner:
    return FixtureProvisioner(settings)


def shopify_rows() -> dict[str, list[dict[str, Any]]]:
    """Synthetic Shopify rows shaped to reproduce the exercise answers."""
    apps = [
        {
            "id": app_id,
            "url": f"https://apps.shopify.com/app-{app_id}",
            "title": f"App {app_id}",
            "tagline": f"Tagline {app_id}",
            "developer": f"Developer {app_id % 50}",
            "developer_link": f"https://apps.shopify.com/partners/dev-{app_id % 50}",
            "icon": f"https://cdn.shopify.com/icon-{app_id}.png",
            "rating": round(1 + (app_id % 40) / 10, 1),
            "reviews_count": app_id % 300,
            "description": f"Description of app {app_id}",
            "pricing_hint": "Free plan available" if app_id % 3 == 0 else None,
        }
        for app_id in range(1, APP_COUNT + 1)
    ]
    categories = [
        {"id": category_id, "title": title}
        for category_id, (title, _) in CATEGORY_SIZES.items()
    ]
    apps_categories = [
        {"app_id": app_id, "category_id": category_id}
        for category_id, (_, size) in CATEGORY_SIZES.items()
        for app_id in range(1, size + 1)
    ]
    pricing_plans = [
        {"id": plan_id, "price": price}
        for plan_id, (price, _) in PRICING_PLAN_SIZES.items()
    ]
    apps_pricing_plans = [
        {"app_id": app_id, "pricing_plan_id": plan_id}
        for plan_id, (_, size) in PRICING_PLAN_SIZES.items()
        for app_id in range(1, size + 1)
    ]
    key_benefits = [
        {"app_id": 1, "title": "Fast setup", "description": "Ready in minutes"},
        {"app_id": 1, "title": "Support", "description": "Round the clock"},
        {"app_id": 2, "title": "Fast setup", "description": "One click install"},
    ]
    reviews = [
        {
            "app_id": 1,
            "author": "Alice Shop",
            "body": "Great app",
            "rating": 5,
            "helpful_count": 3,
            "date_created": "2020-01-02",
            "developer_reply": "Thanks!",
            "developer_reply_date": "2020-01-03",
        },
        {
            "app_id": 1,
            "author": "O'Brien Goods",
            "body": "Works fine",
            "rating": 4,
            "helpful_count": 0,
            "date_created": "2020-02-10",
        },
        {
            "app_id": 2,
            "author": "Alice Shop",
            "body": "Too slow",
            "rating": 2,
            "helpful_count": 1,
            "date_created": "2020-03-15",
        },
    ]
    return {
        "apps": apps,
        "categories": categories,
        "apps_categories": apps_categories,
        "key_benefits": key_benefits,
        "pricing_plans": pricing_plans,
        "apps_pricing_plans": apps_pricing_plans,
        "reviews": reviews,
    }


def movies_rows() -> dict[str, list[dict[str, Any]]]:
    """Synthetic movie rows shaped to reproduce the exercise answers."""
    movies: list[dict[str, Any]] = []
    directors: list[dict[str, Any]] = []
    movie_directors: list[dict[str, Any]] = []

    def add_movie(title: str, budget: int) -> int:
        movie_id = len(movies) + 1
        movies.append(
            {
                "id": movie_id,
                "imdb_id": f"tt{movie_id:07d}",
                "popularity": 1.5,
                "budget": budget,
                "budget_adjusted": float(budget),
                "revenue": budget * 2,
                "revenue_adjusted": float(budget * 2),
                "original_title": title,
                "homepage": None,
                "tagline": None,
                "overview": f"Overview of {title}",
                "runtime": 120,
                "release_date": "2015-06-01",
            }
        )
        return movie_id

    for director_id, (name, budgets) in enumerate(DIRECTOR_BUDGETS.items(), start=1):
        directors.append({"id": director_id, "full_name": name})
        for number, budget in enumerate(budgets, start=1):
            movie_id = add_movie(f"{name} film {number}", budget)
            movie_directors.append({"director_id": director_id, "movie_id": movie_id})

    life_id = add_movie("Life", 58_000_000)
    actors = [
        {"id": actor_id, "full_name": f"Actor {actor_id}"} for actor_id in range(1, 16)
    ]
    movie_actors = [
        {"actor_id": actor_id, "movie_id": movie_id}
        for movie_id, cast in ((life_id, range(1, 13)), (1, range(10, 16)))
        for actor_id in cast
    ]

    keywords = [
        {"id": 1, "keyword": "woman director"},
        {"id": 2, "keyword": "independent film"},
        {"id": 3, "keyword": "based on novel"},
    ]
    keyword_sizes = {1: 5, 2: 4, 3: 2}
    movie_keywords = [
        {"keyword_id": keyword_id, "movie_id": movie_id}
        for keyword_id, size in keyword_sizes.items()
        for movie_id in range(1, size + 1)
    ]

    genres = [
        {"id": 1, "genre": "Drama"},
        {"id": 2, "genre": "Thriller"},
        {"id": 3, "genre": "Crime"},
        {"id": 4, "genre": "Music"},
    ]
    # genre id -> movie ids
    genre_movies = {1: [1, 2, 3], 2: [1, 2], 3: [4], 4: [5]}
    movie_genres = [
        {"genre_id": genre_id, "movie_id": movie_id}
        for genre_id, movie_ids in genre_movies.items()
        for movie_id in movie_ids
    ]
    # movie id -> ratings given by users 1..n
    movie_ratings_by_movie = {
        1: [5, 5, 4],
        2: [5, 3],
        3: [5, 2, 1],
        4: [5, 4, 4, 3],
        5: [4, 3],
    }
    movie_ratings = [
        {
            "user_id": user_id,
            "movie_id": movie_id,
            "rating": float(rating),
            "time_created": "2016-01-01 00:00:00",
        }
        for movie_id, ratings in movie_ratings_by_movie.items()
        for user_id, rating in enumerate(ratings, start=1)
    ]

    return {
        "movies": movies,
        "directors": directors,
        "movie_directors": movie_directors,
        "actors": actors,
        "movie_actors": movie_actors,
        "keywords": keywords,
        "movie_keywords": movie_keywords,
        "genres": genres,
        "movie_genres": movie_genres,
        "movie_ratings": movie_ratings,
    }


async def seed(
    database: Database, dataset: str, rows: dict[str, list[dict[str, Any]]]
) -> None:
    await database.create_dataset(dataset)
    for table, table_rows in rows.items():
        await database.insert_rows(table, table_rows)


@pytest_asyncio.fixture
async def shopify_db(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Database with the shopify schema and synthetic rows."""
    database = Database(tmp_path / "shopify.db")
    await seed(database, "shopify", shopify_rows())
    yield database


@pytest_asyncio.fixture
async def movies_db(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """Database with the movies schema and synthetic rows."""
    database = Database(tmp_path / "movies.db")
    await seed(database, "movies", movies_rows())
    yield database
