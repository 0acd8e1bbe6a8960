"""
Category listing, deduplication and default seeding

Every user gets the same starter set of categories, exactly one per
(name, type). Rows are compared on ``type:name.lower().strip()``, so
"Food / Groceries" and " food / groceries" count as the same category.

list_categories()          -> deduplicated, defaults first, capped per type
ensure_defaults()          -> insert missing defaults, return the list
get_default_category_id()  -> preferred expense category for new entries
"""
import logging

from django.db.models import Case, IntegerField, When

from .models import Category, TYPE_EXPENSE, TYPE_INCOME

logger = logging.getLogger(__name__)

# one entry per (name, type), in display order
DEFAULT_CATEGORIES = [
    # Income
    {'name': 'Salary / Wages', 'type': TYPE_INCOME, 'budget_limit': None, 'color': '#059669'},
    {'name': 'Business / Freelance', 'type': TYPE_INCOME, 'budget_limit': None, 'color': '#10b981'},
    {'name': 'Investments', 'type': TYPE_INCOME, 'budget_limit': None, 'color': '#0d9488'},
    {'name': 'Gifts / Support', 'type': TYPE_INCOME, 'budget_limit': None, 'color': '#34d399'},
    {'name': 'Other Income', 'type': TYPE_INCOME, 'budget_limit': None, 'color': '#bbf7d0'},
    # Expense
    {'name': 'Housing / Rent', 'type': TYPE_EXPENSE, 'budget_limit': None, 'color': '#a855f7'},
    {'name': 'Food / Groceries', 'type': TYPE_EXPENSE, 'budget_limit': None, 'color': '#f59e0b'},
    {'name': 'Transportation', 'type': TYPE_EXPENSE, 'budget_limit': None, 'color': '#3b82f6'},
    {'name': 'Bills & Subscriptions', 'type': TYPE_EXPENSE, 'budget_limit': None, 'color': '#8b5cf6'},
    {'name': 'Health & Personal Care', 'type': TYPE_EXPENSE, 'budget_limit': None, 'color': '#06b6d4'},
    {'name': 'Other Expenses', 'type': TYPE_EXPENSE, 'budget_limit': None, 'color': '#64748b'},
]

MIN_CATEGORIES_PER_TYPE = 5


def normalize(name):
    return name.lower().strip()


def category_key(category_type, name):
    return f"{category_type}:{normalize(name)}"


def dedupe(rows):
    """Keep the first row for each (type, normalized name)"""
    seen = {}
    for row in rows:
        seen.setdefault(category_key(row.type, row.name), row)
    return list(seen.values())


def _rank_for_type(rows, category_type):
    """Defaults first (in DEFAULT_CATEGORIES order), then the rest, capped"""
    default_names = [normalize(d['name']) for d in DEFAULT_CATEGORIES if d['type'] == category_type]
    typed = [row for row in rows if row.type == category_type]

    requested = [row for row in typed if row.normalized_name in default_names]
    others = [row for row in typed if row.normalized_name not in default_names]
    requested.sort(key=lambda row: default_names.index(row.normalized_name))

    return (requested + others)[:max(MIN_CATEGORIES_PER_TYPE, len(default_names))]


def list_categories(user):
    """The user's categories: income block then expense block"""
    rows = Category.objects.filter(user=user).order_by('type', 'name')
    unique_rows = dedupe(rows)
    return _rank_for_type(unique_rows, TYPE_INCOME) + _rank_for_type(unique_rows, TYPE_EXPENSE)


def ensure_defaults(user):
    """Insert any missing default categories and return the full list"""
    existing = list_categories(user)
    existing_keys = {category_key(c.type, c.name) for c in existing}

    to_insert = [
        Category(
            user=user,
            name=d['name'],
            type=d['type'],
            budget_limit=d['budget_limit'],
            color=d['color'],
        )
        for d in DEFAULT_CATEGORIES
        if category_key(d['type'], d['name']) not in existing_keys
    ]

    if to_insert:
        # a concurrent request may have seeded the same rows already
        Category.objects.bulk_create(to_insert, ignore_conflicts=True)
        logger.info(f"Default categories seeded: user_id={user.pk}, count={len(to_insert)}")
        return list_categories(user)

    return existing


def get_default_category_id(user):
    """Housing expense category, else the first expense, else the first category"""
    categories = ensure_defaults(user)
    main_expense = next((c for c in categories if 'Housing' in c.name and c.type == TYPE_EXPENSE), None)
    if main_expense is None:
        main_expense = next((c for c in categories if c.type == TYPE_EXPENSE), None)
    if main_expense is not None:
        return main_expense.pk
    return categories[0].pk if categories else None


def categories_by_type(categories, category_type):
    return [c for c in categories if c.type == category_type]


def as_queryset(categories):
    """Queryset over ``categories`` that keeps their list order (for choice fields)"""
    pks = [c.pk for c in categories]
    preserved = Case(*[When(pk=pk, then=pos) for pos, pk in enumerate(pks)], output_field=IntegerField())
    return Category.objects.filter(pk__in=pks).order_by(preserved) if pks else Category.objects.none()
