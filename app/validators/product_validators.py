from pydantic import field_validator


class ProductValidatorMixin:
    @field_validator("name", check_fields=False)
    @classmethod
    def name_valid(cls, v):
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Product name cannot be empty")
        if len(v) > 200:
            raise ValueError("Product name must be up to 200 characters")
        return v

    @field_validator("description", check_fields=False)
    @classmethod
    def description_valid(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Product description cannot be empty")
        return v

    @field_validator("price", check_fields=False)
    @classmethod
    def price_valid(cls, v):
        if v is not None and v < 0:
            raise ValueError("Price must be non-negative")
        return v

    @field_validator("brand", check_fields=False)
    @classmethod
    def brand_valid(cls, v):
        if v is not None and len(v) > 100:
            raise ValueError("Brand name must be up to 100 characters")
        return v
