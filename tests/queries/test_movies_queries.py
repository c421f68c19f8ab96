"""Exercise queries over the synthetic movies fixture."""

import pytest

from fixturedb.database.facade import Database
from fixturedb.exceptions import CardinalityError
from fixturedb.harness import AssertionHarness, minutes
from fixturedb.queries import movies


@pytest.fixture
def harness(movies_db: Database) -> AssertionHarness:
    return AssertionHarness(movies_db, timeout=minutes(3))


@pytest.mark.asyncio
async def test_top_directors_by_budget(harness: AssertionHarness) -> None:
    await harness.expect_rows(
        *movies.top_directors_by_budget(3),
        [
            {"director": "Ridley Scott", "total_budget": 697900000},
            {"director": "Christopher Nolan", "total_budget": 510000000},
            {"director": "Michael Bay", "total_budget": 500000000},
        ],
    )


@pytest.mark.asyncio
async def test_top_keywords(harness: AssertionHarness) -> None:
    await harness.expect_rows(
        *movies.top_keywords(2),
        [
            {"keyword": "woman director", "count": 5},
            {"keyword": "independent film", "count": 4},
        ],
    )


@pytest.mark.asyncio
async def test_actor_count_for_life(harness: AssertionHarness) -> None:
    await harness.expect_single_row(
        *movies.actor_count_by_title("Life"), {"original_title": "Life", "count": 12}
    )


@pytest.mark.asyncio
async def test_actor_count_for_unknown_title(movies_db: Database) -> None:
    with pytest.raises(CardinalityError):
        await movies_db.select_single_row(*movies.actor_count_by_title("Death"))


@pytest.mark.asyncio
async def test_top_genres_by_five_star_ratings(harness: AssertionHarness) -> None:
    await harness.expect_rows(
        *movies.top_genres_by_rating_count(5, limit=3),
        [
            {"genre": "Drama", "five_stars_count": 4},
            {"genre": "Thriller", "five_stars_count": 3},
            {"genre": "Crime", "five_stars_count": 1},
        ],
    )


@pytest.mark.asyncio
async def test_top_genres_by_average_rating(harness: AssertionHarness) -> None:
    await harness.expect_rows(
        *movies.top_genres_by_average_rating(3),
        [
            {"genre": "Thriller", "avg_rating": 4.4},
            {"genre": "Crime", "avg_rating": 4.0},
            {"genre": "Drama", "avg_rating": 3.75},
        ],
    )


@pytest.mark.asyncio
async def test_movies_schema_created(movies_db: Database) -> None:
    for table in movies_db.registry.table_names("movies"):
        assert await movies_db.table_exists(table), table

    unique = [
        row["name"]
        for row in await movies_db.index_list("movies")
        if row["unique"] == 1
    ]
    assert unique == ["movies_imdb_id_unq_idx"]
