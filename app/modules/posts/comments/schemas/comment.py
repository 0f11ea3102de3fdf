from pydantic import BaseModel, Field, field_validator

COMMENT_MAX_LENGTH = 500

class CommentCreate(BaseModel):
    content: str = Field(default="", validate_default=True)

    @field_validator("content", mode="before")
    @classmethod
    def validate_content(cls, v):
        text = str(v).strip() if v is not None else ""
        if not text:
            raise ValueError("Comment content is required")
        if len(text) > COMMENT_MAX_LENGTH:
            raise ValueError(f"Comment must be at most {COMMENT_MAX_LENGTH} characters")
        return text
