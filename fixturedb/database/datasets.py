"""Table and index definitions of the exercise datasets."""

from fixturedb.types import ColumnType

from .schema import ColumnDefinition, Dataset, IndexDefinition, TableDefinition

INTEGER = ColumnType.INTEGER
REAL = ColumnType.REAL
TEXT = ColumnType.TEXT


def _pk(name: str, type_: ColumnType = INTEGER) -> ColumnDefinition:
    return ColumnDefinition(name, type_, nullable=False, primary_key=True)


def _required(name: str, type_: ColumnType) -> ColumnDefinition:
    return ColumnDefinition(name, type_, nullable=False)


def _optional(name: str, type_: ColumnType) -> ColumnDefinition:
    return ColumnDefinition(name, type_, nullable=True)


def _lookup_table(name: str, label: str) -> TableDefinition:
    """An ``id`` + single text label table such as ``genres``."""
    return TableDefinition(name, [_pk("id"), _required(label, TEXT)])


def _link_table(name: str, *columns: str) -> TableDefinition:
    """A many-to-many table keyed by all of its integer columns."""
    return TableDefinition(name, [_pk(col) for col in columns])


# Shopify app store

APPS = "apps"
CATEGORIES = "categories"
APPS_CATEGORIES = "apps_categories"
KEY_BENEFITS = "key_benefits"
PRICING_PLANS = "pricing_plans"
APPS_PRICING_PLANS = "apps_pricing_plans"
REVIEWS = "reviews"

SHOPIFY = Dataset(
    name="shopify",
    tables=[
        TableDefinition(
            APPS,
            [
                _pk("id"),
                _required("url", TEXT),
                _required("title", TEXT),
                _required("tagline", TEXT),
                _required("developer", TEXT),
                _required("developer_link", TEXT),
                _required("icon", TEXT),
                _required("rating", REAL),
                _required("reviews_count", INTEGER),
                _required("description", TEXT),
                _optional("pricing_hint", TEXT),
            ],
        ),
        _lookup_table(CATEGORIES, "title"),
        _link_table(APPS_CATEGORIES, "app_id", "category_id"),
        TableDefinition(
            KEY_BENEFITS,
            [
                _pk("app_id"),
                _pk("title", TEXT),
                _required("description", TEXT),
            ],
        ),
        _lookup_table(PRICING_PLANS, "price"),
        _link_table(APPS_PRICING_PLANS, "app_id", "pricing_plan_id"),
        TableDefinition(
            REVIEWS,
            [
                _required("app_id", INTEGER),
                _required("author", TEXT),
                _required("body", TEXT),
                _required("rating", INTEGER),
                _required("helpful_count", INTEGER),
                _required("date_created", TEXT),
                _optional("developer_reply", TEXT),
                _optional("developer_reply_date", TEXT),
            ],
        ),
    ],
    indexes=[
        IndexDefinition("pricing_plans_price_idx", PRICING_PLANS, ["price"]),
        IndexDefinition("reviews_author_idx", REVIEWS, ["author"]),
        IndexDefinition("apps_id_unq_idx", APPS, ["id"], unique=True),
    ],
)


# Movies

MOVIES = "movies"
ACTORS = "actors"
DIRECTORS = "directors"
KEYWORDS = "keywords"
GENRES = "genres"
PRODUCTION_COMPANIES = "production_companies"
MOVIE_ACTORS = "movie_actors"
MOVIE_DIRECTORS = "movie_directors"
MOVIE_KEYWORDS = "movie_keywords"
MOVIE_GENRES = "movie_genres"
MOVIE_PRODUCTION_COMPANIES = "movie_production_companies"
MOVIE_RATINGS = "movie_ratings"

MOVIES_DATASET = Dataset(
    name="movies",
    tables=[
        TableDefinition(
            MOVIES,
            [
                _pk("id"),
                _required("imdb_id", TEXT),
                _required("popularity", REAL),
                _required("budget", INTEGER),
                _required("budget_adjusted", REAL),
                _required("revenue", INTEGER),
                _required("revenue_adjusted", REAL),
                _required("original_title", TEXT),
                _optional("homepage", TEXT),
                _optional("tagline", TEXT),
                _optional("overview", TEXT),
                _required("runtime", INTEGER),
                _required("release_date", TEXT),
            ],
        ),
        _lookup_table(ACTORS, "full_name"),
        _lookup_table(DIRECTORS, "full_name"),
        _lookup_table(KEYWORDS, "keyword"),
        _lookup_table(GENRES, "genre"),
        _lookup_table(PRODUCTION_COMPANIES, "company_name"),
        _link_table(MOVIE_ACTORS, "actor_id", "movie_id"),
        _link_table(MOVIE_DIRECTORS, "director_id", "movie_id"),
        _link_table(MOVIE_KEYWORDS, "keyword_id", "movie_id"),
        _link_table(MOVIE_GENRES, "genre_id", "movie_id"),
        _link_table(MOVIE_PRODUCTION_COMPANIES, "company_id", "movie_id"),
        TableDefinition(
            MOVIE_RATINGS,
            [
                _pk("user_id"),
                _pk("movie_id"),
                _required("rating", REAL),
                _required("time_created", TEXT),
            ],
        ),
    ],
    indexes=[
        IndexDefinition("movies_imdb_id_unq_idx", MOVIES, ["imdb_id"], unique=True),
        IndexDefinition("movies_release_date_idx", MOVIES, ["release_date"]),
        IndexDefinition("movie_ratings_movie_id_idx", MOVIE_RATINGS, ["movie_id"]),
    ],
)

ALL_DATASETS = (SHOPIFY, MOVIES_DATASET)
