"""Weighted text search over products."""

from collections.abc import Mapping

from sqlalchemy import case, literal, select
from sqlalchemy.ext.asyncio import AsyncSession

from shop.models.product import Product

# Column name -> weight of a single token match in that column.
DEFAULT_WEIGHTS: Mapping[str, int] = {"name": 10, "description": 5}


class ProductSearch:
    """Scores each product by the query tokens found in its searchable columns.

    A product matches when at least one token appears (case-insensitive,
    substring) in one of the columns. Results are ordered by score, highest
    first, then by id.
    """

    def __init__(self, session: AsyncSession, weights: Mapping[str, int] = DEFAULT_WEIGHTS) -> None:
        self.session = session
        self.weights = dict(weights)

    @staticmethod
    def tokenize(text: str) -> list[str]:
        return list(dict.fromkeys(token.lower() for token in text.split()))

    async def search(self, text: str) -> list[Product]:
        tokens = self.tokenize(text)
        if not tokens:
            return []

        score = literal(0)
        for token in tokens:
            for column_name, weight in self.weights.items():
                column = getattr(Product, column_name)
                # autoescape: "%" and "_" in a token match literally
                matched = column.icontains(token, autoescape=True)
                score = score + case((matched, weight), else_=0)

        scored = score.label("score")
        query = (
            select(Product, scored)
            .where(score > 0)
            .order_by(scored.desc(), Product.id)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
