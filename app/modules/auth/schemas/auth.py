from typing import Optional
from pydantic import ConfigDict, BaseModel
from pydantic.alias_generators import to_camel

class TokenValidation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    valid: bool = True
    user_id: str
    username: Optional[str] = None
    is_verified: bool
