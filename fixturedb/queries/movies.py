"""Query shapes of the movies exercises."""

from fixturedb.database.utils import check_limit
from fixturedb.types import QueryType


def top_directors_by_budget(limit: int = 3) -> QueryType:
    """Directors ranked by the summed budget of their movies."""
    query = """
        SELECT d.full_name AS director, SUM(m.budget) AS total_budget
        FROM directors d
        JOIN movie_directors md ON d.id = md.director_id
        JOIN movies m ON md.movie_id = m.id
        GROUP BY d.full_name
        ORDER BY total_budget DESC
        LIMIT :limit
    """
    return query, {"limit": check_limit(limit)}


def top_keywords(limit: int = 10) -> QueryType:
    query = """
        SELECT k.keyword, COUNT(mk.movie_id) AS count
        FROM keywords k
        JOIN movie_keywords mk ON k.id = mk.keyword_id
        GROUP BY k.keyword
        ORDER BY count DESC
        LIMIT :limit
    """
    return query, {"limit": check_limit(limit)}


def actor_count_by_title(title: str) -> QueryType:
    """Cast size of the movies with the given original title."""
    query = """
        SELECT m.original_title, COUNT(ma.actor_id) AS count
        FROM movies m
        JOIN movie_actors ma ON m.id = ma.movie_id
        WHERE m.original_title = :title
        GROUP BY m.original_title
    """
    return query, {"title": title}


def top_genres_by_rating_count(rating: float = 5, limit: int = 3) -> QueryType:
    query = """
        SELECT g.genre, COUNT(mr.rating) AS five_stars_count
        FROM genres g
        JOIN movie_genres mg ON g.id = mg.genre_id
        JOIN movies m ON mg.movie_id = m.id
        JOIN movie_ratings mr ON m.id = mr.movie_id
        WHERE mr.rating = :rating
        GROUP BY g.genre
        ORDER BY five_stars_count DESC
        LIMIT :limit
    """
    return query, {"rating": rating, "limit": check_limit(limit)}


def top_genres_by_average_rating(limit: int = 3) -> QueryType:
    query = """
        SELECT g.genre, ROUND(AVG(mr.rating), 2) AS avg_rating
        FROM genres g
        JOIN movie_genres mg ON g.id = mg.genre_id
        JOIN movies m ON mg.movie_id = m.id
        JOIN movie_ratings mr ON m.id = mr.movie_id
        GROUP BY g.genre
        ORDER BY avg_rating DESC
        LIMIT :limit
    """
    return query, {"limit": check_limit(limit)}
