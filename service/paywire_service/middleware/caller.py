"""Caller identification set by the upstream auth layer."""

from fastapi import Header, HTTPException, status


async def get_caller_id(
    x_user_id: str = Header(..., alias="X-User-Id", description="Authenticated user id"),
) -> str:
    """Get the signed-in user's id from the request.

    Raises HTTPException if the header is blank.
    """
    caller_id = x_user_id.strip()
    if not caller_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error_code": "UNAUTHENTICATED", "message": "Missing user id"},
        )
    return caller_id
