from fastapi import APIRouter
from pydantic import Field

from watchhub.core.modules.session.models import DEVICE_MAX_LENGTH
from watchhub.core.modules.user.models import UserProfile
from watchhub.web.deps import AppDep, UserAgentDep
from watchhub.web.openapi import ErrorResponse
from watchhub.web.schemas import AuthResponse, CamelModel, ChallengeResponse

router = APIRouter(tags=["auth"])


class SignedChallenge(CamelModel):
    code: str = Field(..., description="Challenge code returned by the start step")
    signature: str = Field(..., description="Ed25519 signature of the code, URL-safe base64")


class RegisterStartRequest(CamelModel):
    captcha_token: str | None = Field(None, description="Captcha response, required when captcha is enabled")


class RegisterCompleteRequest(CamelModel):
    public_key: str = Field(..., description="Ed25519 public key, URL-safe base64")
    challenge: SignedChallenge
    namespace: str = Field(..., min_length=1)
    device: str = Field(..., min_length=1, max_length=DEVICE_MAX_LENGTH)
    profile: UserProfile


class LoginStartRequest(CamelModel):
    public_key: str = Field(..., description="Ed25519 public key, URL-safe base64")


class LoginCompleteRequest(CamelModel):
    public_key: str
    challenge: SignedChallenge
    device: str = Field(..., min_length=1, max_length=DEVICE_MAX_LENGTH)


class DerivePublicKeyRequest(CamelModel):
    mnemonic: str = Field(..., min_length=1)


class DerivePublicKeyResponse(CamelModel):
    public_key: str


@router.post(
    "/auth/register/start",
    summary="Start registration",
    description="Issue a registration challenge. Requires a captcha token when captcha is enabled.",
    operation_id="registerStart",
    responses={
        200: {"description": "Challenge issued"},
        400: {"model": ErrorResponse, "description": "Invalid request body"},
        401: {"model": ErrorResponse, "description": "Captcha rejected"},
    },
)
async def register_start(body: RegisterStartRequest, app: AppDep) -> ChallengeResponse:
    challenge = await app.start_registration(body.captcha_token)
    return ChallengeResponse(challenge=challenge.code)


@router.post(
    "/auth/register/complete",
    summary="Complete registration",
    description="Verify the signed challenge, create the account and open a session.",
    operation_id="registerComplete",
    responses={
        200: {"description": "User created and session opened"},
        400: {"model": ErrorResponse, "description": "Invalid request body or missing user agent"},
        401: {"model": ErrorResponse, "description": "Invalid challenge code"},
        409: {"model": ErrorResponse, "description": "Public key already registered"},
    },
)
async def register_complete(body: RegisterCompleteRequest, app: AppDep, user_agent: UserAgentDep) -> AuthResponse:
    result = await app.complete_registration(
        public_key=body.public_key,
        code=body.challenge.code,
        signature=body.challenge.signature,
        namespace=body.namespace,
        device=body.device,
        profile=body.profile,
        user_agent=user_agent,
    )
    return AuthResponse.from_result(result)


@router.post(
    "/auth/login/start",
    summary="Start login",
    description="Issue a login challenge for an existing public key.",
    operation_id="loginStart",
    responses={
        200: {"description": "Challenge issued"},
        400: {"model": ErrorResponse, "description": "Invalid request body"},
        401: {"model": ErrorResponse, "description": "User cannot be found"},
    },
)
async def login_start(body: LoginStartRequest, app: AppDep) -> ChallengeResponse:
    challenge = await app.start_login(body.public_key)
    return ChallengeResponse(challenge=challenge.code)


@router.post(
    "/auth/login/complete",
    summary="Complete login",
    description="Verify the signed challenge and open a new session for this device.",
    operation_id="loginComplete",
    responses={
        200: {"description": "Session opened"},
        400: {"model": ErrorResponse, "description": "Invalid request body or missing user agent"},
        401: {"model": ErrorResponse, "description": "Invalid challenge code or unknown user"},
    },
)
async def login_complete(body: LoginCompleteRequest, app: AppDep, user_agent: UserAgentDep) -> AuthResponse:
    result = await app.complete_login(
        public_key=body.public_key,
        code=body.challenge.code,
        signature=body.challenge.signature,
        device=body.device,
        user_agent=user_agent,
    )
    return AuthResponse.from_result(result)


@router.post(
    "/auth/derive-public-key",
    summary="Derive public key",
    description="Return the public key a client derives from a mnemonic (PBKDF2-SHA256 seed, Ed25519).",
    operation_id="derivePublicKey",
    responses={
        200: {"description": "Derived public key"},
        400: {"model": ErrorResponse, "description": "Invalid request body"},
    },
)
async def derive_public_key(body: DerivePublicKeyRequest, app: AppDep) -> DerivePublicKeyResponse:
    return DerivePublicKeyResponse(public_key=app.derive_public_key(body.mnemonic))
