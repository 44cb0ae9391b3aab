from pydantic import field_validator


class ReviewValidatorMixin:
    @field_validator('rating', check_fields=False)
    @classmethod
    def rating_valid(cls, v):
        if v is not None and (v < 1 or v > 5):
            raise ValueError('Rating must be between 1 and 5')
        return v

    @field_validator('title', check_fields=False)
    @classmethod
    def title_valid(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError('Review title cannot be empty')
        if len(v) > 100:
            raise ValueError('Title can be up to 100 characters')
        return v

    @field_validator('comment', check_fields=False)
    @classmethod
    def comment_valid(cls, v):
        if v is None:
            return v
        if not v.strip():
            raise ValueError('Review comment cannot be empty')
        if len(v) > 1000:
            raise ValueError('Comment can be up to 1000 characters')
        return v
