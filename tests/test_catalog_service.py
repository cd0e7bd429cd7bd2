import pytest

from aromasouq.core.exceptions import (
    AuthorizationError,
    BadRequestError,
    ConflictError,
    NotFoundError,
)
from aromasouq.models import UserRole, VendorStatus
from aromasouq.schemas.category import CategoryCreate, CategoryUpdate
from aromasouq.schemas.product import (
    FlashSaleBulkAdd,
    FlashSaleBulkRemove,
    ProductCreate,
    ProductFilter,
    StockUpdate,
)
from aromasouq.services.category_service import CategoryService
from aromasouq.services.product_service import ProductService


@pytest.fixture
def category_service(db_session):
    return CategoryService(db_session)


@pytest.fixture
def product_service(db_session):
    return ProductService(db_session)


class TestCategoryService:
    def test_get_by_id_or_slug(self, category_service):
        created = category_service.create(CategoryCreate(name="Floral", slug="floral"))

        assert category_service.get(created.id).slug == "floral"
        assert category_service.get("floral").id == created.id
        with pytest.raises(NotFoundError):
            category_service.get("nope")

    def test_duplicate_slug(self, category_service):
        category_service.create(CategoryCreate(name="Floral", slug="floral"))
        with pytest.raises(ConflictError):
            category_service.create(CategoryCreate(name="Floral 2", slug="floral"))

    def test_cycles_are_rejected(self, category_service):
        root = category_service.create(CategoryCreate(name="Fragrance", slug="fragrance"))
        child = category_service.create(
            CategoryCreate(name="Women", slug="women", parent_id=root.id)
        )
        grandchild = category_service.create(
            CategoryCreate(name="Evening", slug="evening", parent_id=child.id)
        )

        with pytest.raises(BadRequestError, match="own parent"):
            category_service.update(root.id, CategoryUpdate(parent_id=root.id))
        with pytest.raises(BadRequestError, match="circular reference"):
            category_service.update(root.id, CategoryUpdate(parent_id=grandchild.id))

    def test_tree_lists_children(self, category_service):
        root = category_service.create(CategoryCreate(name="Fragrance", slug="fragrance"))
        category_service.create(CategoryCreate(name="Women", slug="women", parent_id=root.id))

        tree = {node.slug: node for node in category_service.list()}

        assert [child.slug for child in tree["fragrance"].children] == ["women"]

    def test_cannot_remove_category_in_use(self, category_service, category, make_vendor, make_product):
        child = category_service.create(
            CategoryCreate(name="Oud", slug="oud", parent_id=category.id)
        )
        with pytest.raises(BadRequestError, match="subcategories"):
            category_service.remove(category.id)

        _, vendor = make_vendor()
        make_product(vendor.id)
        category_service.remove(child.id)
        with pytest.raises(BadRequestError, match="products"):
            category_service.remove(category.id)


class TestProductService:
    def _create_request(self, category_id, **overrides):
        data = dict(
            name="Royal Oud",
            slug="royal-oud",
            sku="OUD-001",
            price=450.0,
            stock=5,
            category_id=category_id,
        )
        data.update(overrides)
        return ProductCreate(**data)

    def test_vendor_creates_own_product(self, product_service, make_vendor, category):
        user, vendor = make_vendor()

        product = product_service.create(user, self._create_request(category.id))

        assert product.vendor_id == vendor.id
        assert product.is_active is True

    def test_pending_vendor_cannot_create(self, product_service, make_vendor, category):
        user, _ = make_vendor(status=VendorStatus.PENDING)

        with pytest.raises(AuthorizationError, match="not approved"):
            product_service.create(user, self._create_request(category.id))

    def test_admin_must_name_vendor(self, product_service, make_user, category):
        admin = make_user(role=UserRole.ADMIN)

        with pytest.raises(BadRequestError, match="vendor_id is required"):
            product_service.create(admin, self._create_request(category.id))

    def test_duplicate_sku(self, product_service, make_vendor, category):
        user, _ = make_vendor()
        product_service.create(user, self._create_request(category.id))

        with pytest.raises(ConflictError, match="SKU"):
            product_service.create(user, self._create_request(category.id, slug="other-slug"))

    def test_other_vendor_cannot_modify(self, product_service, make_vendor, make_product):
        _, owner = make_vendor()
        stranger, _ = make_vendor()
        product = make_product(owner.id)

        with pytest.raises(AuthorizationError):
            product_service.remove(stranger, product.id)

    def test_stock_cannot_go_negative(self, product_service, make_vendor, make_product):
        user, vendor = make_vendor()
        product = make_product(vendor.id, stock=3)

        assert product_service.update_stock(user, product.id, StockUpdate(quantity=2)).stock == 5
        with pytest.raises(BadRequestError, match="Insufficient stock"):
            product_service.update_stock(user, product.id, StockUpdate(quantity=-6))

    def test_public_list_hides_inactive(self, product_service, make_vendor, make_product):
        _, vendor = make_vendor()
        visible = make_product(vendor.id)
        make_product(vendor.id, is_active=False)

        page = product_service.list(ProductFilter(is_active=None), page=1, limit=20)

        assert [p.id for p in page.data] == [visible.id]

    def test_flash_sale_from_percent(self, product_service, make_vendor, make_product):
        user, vendor = make_vendor()
        product = make_product(vendor.id, price=200.0)

        result = product_service.bulk_add_flash_sale(
            user, FlashSaleBulkAdd(product_ids=[product.id], discount_percent=25)
        )

        assert result.updated_count == 1
        on_sale = product_service.get(product.id)
        assert on_sale.is_on_sale is True
        assert on_sale.sale_price == 150.0
        assert [p.id for p in product_service.my_flash_sales(user)] == [product.id]

        product_service.bulk_remove_flash_sale(user, FlashSaleBulkRemove(product_ids=[product.id]))
        assert product_service.get(product.id).sale_price is None

    def test_flash_sale_price_must_be_lower(self, product_service, make_vendor, make_product):
        user, vendor = make_vendor()
        product = make_product(vendor.id, price=100.0)

        with pytest.raises(BadRequestError, match="lower than the regular price"):
            product_service.bulk_add_flash_sale(
                user, FlashSaleBulkAdd(product_ids=[product.id], sale_price=120.0)
            )
        with pytest.raises(BadRequestError, match="Either sale_price or discount_percent"):
            product_service.bulk_add_flash_sale(user, FlashSaleBulkAdd(product_ids=[product.id]))
