from typing import Sequence

INVALID_PAYLOAD_MESSAGE = "Request body contains invalid or missing parameters."


class RecipeServiceError(Exception):
    """Base error for recipe operations, rendered as a JSON error response."""

    status_code: int = 500

    def __init__(self, detail: str, headers: dict[str, str] | None = None):
        self.detail = detail
        self.headers = headers
        super().__init__(detail)


class InvalidRecipeError(RecipeServiceError):
    status_code = 400

    def __init__(self, detail: str = INVALID_PAYLOAD_MESSAGE):
        super().__init__(detail)


class InvalidIngredientError(InvalidRecipeError):
    def __init__(self, missing_fields: Sequence[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"New ingredients are missing required fields: {', '.join(self.missing_fields)}"
        )


class RecipeNotFoundError(RecipeServiceError):
    status_code = 404

    def __init__(self, recipe_id: int):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with ID {recipe_id} not found.")


class DuplicateRecipeTitleError(RecipeServiceError):
    status_code = 409

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Recipe with title '{title}' already exists.")


class MethodNotAllowedError(RecipeServiceError):
    status_code = 405

    def __init__(self, method: str, allowed_methods: Sequence[str]):
        self.allowed_methods = list(allowed_methods)
        super().__init__(
            f"Method {method} not allowed.",
            headers={"Allow": ", ".join(self.allowed_methods)},
        )


class UnknownStoreError(RecipeServiceError):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(f"An unknown error occurred: {message}")
