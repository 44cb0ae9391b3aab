"""
HTTP-level tests for the product, review and auth routes.

Services are replaced through FastAPI dependency overrides, so no MongoDB
is needed; the lifespan hook is not run because the client is not used as a
context manager.
"""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from app.core.config import config
from app.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from app.dependencies.auth import get_current_user
from app.dependencies.services import get_auth_service, get_product_service, get_review_service
from app.models.user import User, UserAccount
from app.schemas.auth import UserResponse
from app.schemas.product import ProductDetailResponse, ProductListResponse, ProductResponse
from app.schemas.review import ReviewResponse, ReviewerSummary
from main import app

PRODUCT_ID = "65a1b2c3d4e5f6a7b8c9d0e1"
REVIEW_ID = "65a1b2c3d4e5f6a7b8c9d0e2"
USER_ID = "65a1b2c3d4e5f6a7b8c9d0e3"


@pytest.fixture
def product_service():
    return AsyncMock()


@pytest.fixture
def review_service():
    return AsyncMock()


@pytest.fixture
def auth_service():
    return AsyncMock()


@pytest.fixture
def client(product_service, review_service, auth_service):
    app.dependency_overrides[get_product_service] = lambda: product_service
    app.dependency_overrides[get_review_service] = lambda: review_service
    app.dependency_overrides[get_auth_service] = lambda: auth_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in():
    app.dependency_overrides[get_current_user] = lambda: User(id=USER_ID, role="user")


@pytest.fixture
def laptop():
    return ProductResponse(
        id=PRODUCT_ID,
        name="EduBook Pro",
        category="laptop",
        description="Lightweight laptop",
        price=500.0,
        rating=4.0,
        review_count=1,
        system_recommended=True,
        approved=True,
        added_by=USER_ID,
    )


@pytest.fixture
def review():
    return ReviewResponse(
        id=REVIEW_ID,
        product=PRODUCT_ID,
        user=USER_ID,
        rating=4,
        title="Solid",
        comment="Good battery",
        reviewer=ReviewerSummary(id=USER_ID, username="alice"),
    )


class TestCatalogue:

    def test_list_products_query_aliases(self, client, product_service, laptop):
        product_service.list_products.return_value = ProductListResponse(
            products=[laptop], total_pages=1, current_page=1, total=1
        )

        response = client.get("/api/products?minPrice=100&maxPrice=600&category=laptop&targetAudience=teacher")

        assert response.status_code == 200
        kwargs = product_service.list_products.call_args.kwargs
        assert kwargs["min_price"] == 100
        assert kwargs["max_price"] == 600
        assert kwargs["category"] == "laptop"
        assert kwargs["target_audience"] == "teacher"
        data = response.json()
        assert data["totalPages"] == 1
        assert data["currentPage"] == 1
        assert data["products"][0]["reviewCount"] == 1
        assert data["products"][0]["systemRecommended"] is True

    def test_search_requires_query(self, client, product_service):
        product_service.search_products.side_effect = BadRequestError("Search query required")

        response = client.get("/api/products/search")

        assert response.status_code == 400
        assert response.json()["error"] == "Search query required"

    def test_search_is_not_a_product_id(self, client, product_service, laptop):
        product_service.search_products.return_value = [laptop]

        response = client.get("/api/products/search", params={"q": "I need a laptop for programming"})

        assert response.status_code == 200
        product_service.search_products.assert_awaited_once_with("I need a laptop for programming")
        product_service.get_product.assert_not_called()

    def test_recommendations(self, client, product_service):
        product_service.get_recommendations.return_value = []

        response = client.get("/api/products/recommendations?userType=student&useCase=homework&budget=300")

        assert response.status_code == 200
        product_service.get_recommendations.assert_awaited_once_with(
            user_type="student", use_case="homework", budget=300
        )

    def test_missing_product(self, client, product_service):
        product_service.get_product.side_effect = NotFoundError("Product not found")

        response = client.get(f"/api/products/{PRODUCT_ID}")

        assert response.status_code == 404
        assert response.json()["error"] == "Product not found"

    def test_product_detail_anonymous(self, client, product_service, laptop):
        product_service.get_product.return_value = ProductDetailResponse(**laptop.model_dump(), reviews=[])

        response = client.get(f"/api/products/{PRODUCT_ID}")

        assert response.status_code == 200
        product_service.get_product.assert_awaited_once_with(PRODUCT_ID, viewer=None)

    def test_product_detail_passes_viewer(self, client, product_service, laptop):
        product_service.get_product.return_value = ProductDetailResponse(**laptop.model_dump(), reviews=[])
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"id": USER_ID, "role": "user", "iat": now, "exp": now + timedelta(hours=1)},
            config.jwt_secret,
            algorithm=config.jwt_algorithm,
        )

        response = client.get(f"/api/products/{PRODUCT_ID}", headers={"Authorization": f"bearer {token}"})

        assert response.status_code == 200
        assert product_service.get_product.call_args.kwargs["viewer"].id == USER_ID

    def test_product_detail_ignores_bad_token(self, client, product_service, laptop):
        product_service.get_product.return_value = ProductDetailResponse(**laptop.model_dump(), reviews=[])

        response = client.get(f"/api/products/{PRODUCT_ID}", headers={"Authorization": "Bearer nonsense"})

        assert response.status_code == 200
        product_service.get_product.assert_awaited_once_with(PRODUCT_ID, viewer=None)


class TestProductWrites:

    def test_create_requires_auth(self, client):
        response = client.post("/api/products", json={
            "name": "EduBook Pro", "category": "laptop", "description": "Lightweight laptop", "price": 500,
        })

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication required"}

    def test_create_product(self, client, signed_in, product_service, laptop):
        product_service.create_product.return_value = laptop

        response = client.post("/api/products", json={
            "name": "EduBook Pro",
            "category": "laptop",
            "description": "Lightweight laptop",
            "price": 500,
            "initialReview": {"title": "Great", "comment": "Fast"},
        })

        assert response.status_code == 201
        assert response.json()["message"] == "Product created successfully"
        product_data, user = product_service.create_product.call_args.args
        assert product_data.initial_review.rating == 5
        assert user.id == USER_ID

    def test_create_invalid_category(self, client, signed_in):
        response = client.post("/api/products", json={
            "name": "Toaster", "category": "toaster", "description": "Hot", "price": 20,
        })

        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    def test_update_forbidden(self, client, signed_in, product_service):
        product_service.update_product.side_effect = ForbiddenError()

        response = client.put(f"/api/products/{PRODUCT_ID}", json={"price": 1})

        assert response.status_code == 403
        assert response.json()["error"] == "Not authorized"

    def test_delete_product(self, client, signed_in, product_service):
        response = client.delete(f"/api/products/{PRODUCT_ID}")

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
        product_service.delete_product.assert_awaited_once()


class TestReviewRoutes:

    def test_create_review(self, client, signed_in, review_service, review):
        review_service.create_review.return_value = review

        response = client.post(
            f"/api/products/{PRODUCT_ID}/reviews",
            json={"rating": 4, "title": "Solid", "comment": "Good battery"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Review added successfully"
        assert data["review"]["reviewer"]["username"] == "alice"
        assert "helpfulVotes" in data["review"]

    def test_duplicate_review(self, client, signed_in, review_service):
        review_service.create_review.side_effect = ConflictError("You have already reviewed this product")

        response = client.post(
            f"/api/products/{PRODUCT_ID}/reviews",
            json={"rating": 4, "title": "Again", "comment": "Second try"},
        )

        assert response.status_code == 409
        assert response.json()["error"] == "You have already reviewed this product"

    def test_rating_out_of_range(self, client, signed_in, review_service):
        response = client.post(
            f"/api/products/{PRODUCT_ID}/reviews",
            json={"rating": 6, "title": "Too good", "comment": "Off the scale"},
        )

        assert response.status_code == 400
        review_service.create_review.assert_not_called()

    def test_list_reviews_defaults(self, client, review_service):
        review_service.list_product_reviews.return_value = {
            "reviews": [], "totalPages": 0, "currentPage": 1, "total": 0,
        }

        response = client.get(f"/api/products/{PRODUCT_ID}/reviews")

        assert response.status_code == 200
        review_service.list_product_reviews.assert_awaited_once_with(PRODUCT_ID, page=1, limit=10)

    def test_toggle_helpful(self, client, signed_in, review_service):
        review_service.toggle_helpful.return_value = 1

        response = client.post(f"/api/products/reviews/{REVIEW_ID}/helpful")

        assert response.status_code == 200
        assert response.json() == {"message": "Review helpful status updated", "helpfulCount": 1}

    def test_delete_review(self, client, signed_in, review_service):
        response = client.delete(f"/api/products/reviews/{REVIEW_ID}")

        assert response.status_code == 200
        assert response.json() == {"message": "Review deleted successfully"}

    def test_my_reviews_requires_auth(self, client):
        assert client.get("/api/products/user/my-reviews").status_code == 401


class TestAuthRoutes:

    def test_register(self, client, auth_service):
        auth_service.register.return_value = UserResponse(
            id=USER_ID, username="alice", email="alice@example.com"
        )

        response = client.post("/api/auth/register", json={
            "username": "alice", "email": "alice@example.com", "password": "s3cret-pass",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "User created"
        assert data["user"]["username"] == "alice"
        assert "password" not in data["user"]
        assert "passwordHash" not in data["user"]

    def test_duplicate_email(self, client, auth_service):
        auth_service.register.side_effect = ConflictError("Email already in use", status_code=400)

        response = client.post("/api/auth/register", json={
            "username": "alice", "email": "alice@example.com", "password": "s3cret-pass",
        })

        assert response.status_code == 400
        assert response.json()["error"] == "Email already in use"

    def test_login(self, client, auth_service):
        account = UserAccount(id=USER_ID, username="alice", email="alice@example.com")
        auth_service.login.return_value = ("signed.jwt.token", UserResponse(**account.model_dump()))

        response = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "s3cret-pass"})

        assert response.status_code == 200
        assert response.json()["token"] == "signed.jwt.token"


class TestServiceRoutes:

    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_correlation_id_echoed(self, client):
        response = client.get("/api/health", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_root(self, client):
        assert client.get("/").json()["status"] == "operational"
