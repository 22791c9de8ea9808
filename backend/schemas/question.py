from pydantic import BaseModel


class QuestionCreate(BaseModel):
    text: str
    control_ref: str | None = None


class QuestionResponse(BaseModel):
    id: int
    text: str
    control_ref: str | None

    model_config = {"from_attributes": True}
