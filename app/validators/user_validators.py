from pydantic import field_validator


class RegistrationValidatorMixin:
    @field_validator('username', check_fields=False)
    @classmethod
    def username_valid(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Username is required')
        return v

    @field_validator('email', check_fields=False)
    @classmethod
    def email_normalized(cls, v):
        return str(v).strip().lower()

    @field_validator('password', check_fields=False)
    @classmethod
    def password_valid(cls, v):
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters')
        # bcrypt only hashes the first 72 bytes
        if len(v.encode('utf-8')) > 72:
            raise ValueError('Password can be up to 72 bytes')
        return v
