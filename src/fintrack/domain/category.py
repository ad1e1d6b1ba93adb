"""Category domain service."""

from typing import Optional
from fintrack.database.base import Database
from fintrack.domain.entities import Category as CategoryEntity
from fintrack.domain.errors import ConflictError, ValidationError

DEFAULT_CATEGORY_NAME = "Outros"

# (name, description, color, icon)
DEFAULT_CATEGORIES = [
    ("Alimentação", "Gastos com supermercados, restaurantes e delivery", "#ff6b6b", "utensils"),
    ("Transporte", "Uber, combustível, pedágios e transporte público", "#4ecdc4", "car"),
    ("Saúde", "Farmácias, consultas médicas e planos de saúde", "#45b7d1", "heart"),
    ("Lazer", "Cinema, shows, viagens e entretenimento", "#f9ca24", "gamepad"),
    ("Compras Online", "E-commerce, apps de compra e marketplaces", "#6c5ce7", "shopping-cart"),
    ("Educação", "Cursos, livros, materiais educacionais", "#a29bfe", "book"),
    ("Casa & Utilidades", "Móveis, decoração, produtos de limpeza", "#fd79a8", "home"),
    ("Vestuário", "Roupas, calçados e acessórios", "#00b894", "tshirt"),
    ("Serviços", "Streaming, assinaturas e serviços diversos", "#e17055", "cog"),
    (DEFAULT_CATEGORY_NAME, "Gastos não categorizados", "#74b9ff", "question"),
]


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        is_default: bool = False,
    ) -> int:
        """Create a category.

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a category with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name must not be empty")
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(f"Category '{name}' already exists")

        return self.db.create_category(
            name=name, description=description, color=color, icon=icon, is_default=is_default
        )

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[CategoryEntity]:
        return self.db.get_category_by_name(name)

    def list_categories(self) -> list[CategoryEntity]:
        return self.db.list_categories()

    def seed_default_categories(self) -> list[str]:
        """Create the default category set, skipping names that already exist.

        Returns:
            Names of the categories that were created
        """
        created = []
        for name, description, color, icon in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(name) is not None:
                continue
            self.db.create_category(
                name=name, description=description, color=color, icon=icon, is_default=True
            )
            created.append(name)
        return created
