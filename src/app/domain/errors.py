from __future__ import annotations


class BlogError(Exception):
    pass


class AuthRequiredError(BlogError):
    def __init__(self, action: str = "perform this action"):
        super().__init__(f"User must be authenticated to {action}")
        self.action = action


class PostNotFoundError(BlogError):
    def __init__(self, post_id: str):
        super().__init__(f"Post not found: {post_id}")
        self.post_id = post_id


class ForbiddenError(BlogError):
    def __init__(self, post_id: str, action: str):
        super().__init__(f"You can only {action} your own posts")
        self.post_id = post_id
        self.action = action


class StorageError(BlogError):
    pass


class BucketNotFoundError(StorageError):
    def __init__(self, bucket: str):
        super().__init__(
            f"Storage bucket '{bucket}' not found. Please run the database schema setup."
        )
        self.bucket = bucket


class PersistenceError(BlogError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Database error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class IdentityProviderError(BlogError):
    pass
