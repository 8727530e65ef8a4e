"""Users router for public profiles."""

from fastapi import APIRouter

from tollgate.presentation.api.dependencies import AuthService, CurrentUser
from tollgate.presentation.api.schemas import ApiResponse, PublicUserResponse

router = APIRouter()


@router.get(
    "/{user_id}",
    summary="Get a user's public profile",
    responses={
        200: {"description": "Public profile"},
        401: {"description": "Not authenticated"},
        404: {"description": "User not found"},
    },
)
async def get_public_profile(
    user_id: str,
    current_user: CurrentUser,  # noqa: ARG001
    auth_service: AuthService,
) -> ApiResponse[PublicUserResponse]:
    """Profile fields visible to every signed-in user; no email or role."""
    user = await auth_service.get_user(user_id)
    public = user.to_public()
    return ApiResponse[PublicUserResponse](
        data=PublicUserResponse(
            id=public.id,
            name=public.name,
            avatar_url=public.avatar_url,
            created_at=public.created_at,
        ),
    )
