"""
Catalog Domain Service.

Product recipes (ingredient links), the category tree and the visible menu.
"""

from sqlalchemy.orm import Session

from cafe_shared.config.logging import get_logger
from cafe_shared.infrastructure.db import safe_commit
from cafe_shared.utils.exceptions import InvalidArgumentError, NotFoundError
from cafe_ordering.models import Category, Ingredient, Product
from cafe_ordering.repositories import (
    get_category_repository,
    get_ingredient_repository,
    get_product_repository,
)

logger = get_logger(__name__)


class CatalogService:
    """Domain service for products, ingredients and categories."""

    def __init__(self, db: Session):
        self._db = db
        self._products = get_product_repository(db)
        self._ingredients = get_ingredient_repository(db)
        self._categories = get_category_repository(db)

    def _get_product(self, product_id: int) -> Product:
        product = self._products.find_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def _get_ingredient(self, ingredient_id: int) -> Ingredient:
        ingredient = self._ingredients.find_by_id(ingredient_id)
        if ingredient is None:
            raise NotFoundError("Ingredient", ingredient_id)
        return ingredient

    def _get_category(self, category_id: int) -> Category:
        category = self._categories.find_by_id(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)
        return category

    # =========================================================================
    # Recipes
    # =========================================================================

    def add_ingredient(
        self,
        product_id: int,
        ingredient_id: int,
        *,
        refresh_dietary: bool = False,
        actor: str | None = None,
    ) -> Product:
        """
        Link an ingredient to a product.

        The allergen flag always follows; vegetarian/vegan/gluten-free only
        change when refresh_dietary is set.
        """
        product = self._get_product(product_id)
        product.add_ingredient(self._get_ingredient(ingredient_id))
        if refresh_dietary:
            product.calculate_dietary_attributes()
        return self._save_product(product, actor)

    def remove_ingredient(
        self,
        product_id: int,
        ingredient_id: int,
        *,
        refresh_dietary: bool = False,
        actor: str | None = None,
    ) -> Product:
        product = self._get_product(product_id)
        if not product.remove_ingredient(self._get_ingredient(ingredient_id)):
            raise InvalidArgumentError(
                "Ingredient is not part of this product",
                product_id=product_id,
                ingredient_id=ingredient_id,
            )
        if refresh_dietary:
            product.calculate_dietary_attributes()
        return self._save_product(product, actor)

    def refresh_dietary_attributes(self, product_id: int, actor: str | None = None) -> Product:
        product = self._get_product(product_id)
        product.calculate_dietary_attributes()
        return self._save_product(product, actor)

    def products_using(self, ingredient_id: int) -> list[Product]:
        self._get_ingredient(ingredient_id)
        return list(self._products.find_by_ingredient(ingredient_id))

    def _save_product(self, product: Product, actor: str | None) -> Product:
        product.set_updated_by(actor)
        self._products.save(product)
        safe_commit(self._db)

        logger.info(
            "Product recipe updated",
            product_id=product.id,
            ingredients=len(product.ingredients),
            contains_allergens=product.contains_allergens,
        )
        return product

    # =========================================================================
    # Category tree
    # =========================================================================

    def visible_menu(self) -> list[Category]:
        """Visible categories, roots first by display order, each followed by its subtree."""
        return [
            category
            for root in self._categories.find_roots()
            for category in root.iter_subtree()
            if category.is_visible()
        ]

    def assign_product(self, category_id: int, product_id: int, actor: str | None = None) -> Category:
        category = self._get_category(category_id)
        product = self._get_product(product_id)

        if product.category_id is not None and product.category_id != category.id:
            previous = self._get_category(product.category_id)
            previous.remove_product(product)
        category.add_product(product)

        category.set_updated_by(actor)
        self._categories.save(category)
        safe_commit(self._db)
        return category

    def move_category(
        self, category_id: int, new_parent_id: int | None, actor: str | None = None
    ) -> Category:
        """
        Re-parent a category (None makes it a root).

        Raises:
            InvalidArgumentError: The new parent lies inside the moved subtree.
        """
        category = self._get_category(category_id)
        old_parent = self._categories.find_parent(category)
        new_parent = self._get_category(new_parent_id) if new_parent_id is not None else None

        if new_parent is old_parent:
            return category
        if new_parent is not None and new_parent.would_create_cycle(category):
            raise InvalidArgumentError(
                f"Category '{category.name}' cannot be placed under '{new_parent.name}': it would create a cycle",
                category_id=category.id,
                new_parent_id=new_parent.id,
            )

        # Detach before attaching: the subcategories collection deletes orphans
        if old_parent is not None:
            if new_parent is None:
                category.parent_id = None
                self._db.expire(old_parent, ["subcategories"])
            else:
                old_parent.remove_subcategory(category)
                category.parent = None
        if new_parent is not None:
            new_parent.add_subcategory(category)

        category.set_updated_by(actor)
        self._categories.save(category)
        safe_commit(self._db)

        logger.info(
            "Category moved",
            category_id=category.id,
            from_parent_id=old_parent.id if old_parent else None,
            to_parent_id=new_parent_id,
        )
        return category
