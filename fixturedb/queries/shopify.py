"""Query shapes of the Shopify app store exercises."""

from fixturedb.database.utils import check_limit
from fixturedb.types import QueryType


def category_by_title(title: str) -> QueryType:
    return "SELECT * FROM categories WHERE title = :title", {"title": title}


def app_categories_by_app_id(app_id: int) -> QueryType:
    """Categories of one app with both titles resolved."""
    query = """
        SELECT ac.category_id, c.title AS category_title, a.title AS app_title
        FROM apps_categories ac
        JOIN categories c ON ac.category_id = c.id
        JOIN apps a ON ac.app_id = a.id
        WHERE ac.app_id = :app_id
        ORDER BY ac.category_id
    """
    return query, {"app_id": app_id}


def review_by_app_and_author(app_id: int, author: str) -> QueryType:
    query = "SELECT * FROM reviews WHERE app_id = :app_id AND author = :author"
    return query, {"app_id": app_id, "author": author}


def free_apps_count() -> QueryType:
    """Number of apps offering a plan priced "0" or described as free."""
    query = """
        SELECT COUNT(DISTINCT a.id) AS count
        FROM apps a
        JOIN apps_pricing_plans app_plan ON a.id = app_plan.app_id
        JOIN pricing_plans p ON app_plan.pricing_plan_id = p.id
        WHERE p.price = '0' OR p.price LIKE '%free%'
    """
    return query, {}


def top_categories(limit: int = 3) -> QueryType:
    """Categories ranked by how many apps they contain."""
    query = """
        SELECT COUNT(ac.app_id) AS count, c.title AS category
        FROM categories c
        JOIN apps_categories ac ON c.id = ac.category_id
        GROUP BY c.id, c.title
        ORDER BY count DESC
        LIMIT :limit
    """
    return query, {"limit": check_limit(limit)}


def top_prices_in_range(low: float, high: float, limit: int = 3) -> QueryType:
    """Most used prices whose amount lies in [low, high].

    Prices look like ``$9.99/month``; the amount is the text between the
    leading dollar sign and the trailing ``/month``.
    """
    query = """
        SELECT
            COUNT(app_plan.app_id) AS count,
            p.price,
            CAST(SUBSTR(p.price, 2, LENGTH(p.price) - 7) AS REAL) AS casted_price
        FROM pricing_plans p
        JOIN apps_pricing_plans app_plan ON p.id = app_plan.pricing_plan_id
        WHERE CAST(SUBSTR(p.price, 2, LENGTH(p.price) - 7) AS REAL)
            BETWEEN :low AND :high
        GROUP BY p.price
        ORDER BY count DESC
        LIMIT :limit
    """
    return query, {"low": low, "high": high, "limit": check_limit(limit)}
