from pydantic import BaseModel, Field, AliasChoices


class AccessTokenResponse(BaseModel):
    """Body of a successful ``POST /access-tokens``."""

    model_config = {"populate_by_name": True}

    access_token: str = Field(
        ...,
        validation_alias=AliasChoices("access_token", "accessToken"),
        description="Bearer token to send in the `Authorization` header.",
    )
    token_id: str = Field(
        ...,
        validation_alias=AliasChoices("id", "token_id"),
        serialization_alias="id",
        description="Identifier of the token, used to revoke it.",
    )
    expires_in: int = Field(
        ...,
        ge=0,
        description="Seconds until the token expires.",
    )
