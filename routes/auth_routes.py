"""
Authentication endpoints.

POST /auth/signup      — create an unverified password account
POST /auth/send-otp    — mail a fresh 6-digit verification code
POST /auth/verify-otp  — confirm the code, mark the email verified, sign in
POST /auth/login       — email + password sign-in
POST /auth/google      — Google ID token sign-in (creates or links the account)
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dependencies import get_auth_service, get_otp_service
from schemas.dto.requests.auth import (
    GoogleLoginRequest,
    LoginRequest,
    SendOtpRequest,
    SignupRequest,
    VerifyOtpRequest,
)
from schemas.dto.responses.auth import AuthResponse, SignupResponse, UserSummaryResponse
from schemas.dto.responses.common import MessageResponse, error_responses
from services.auth_service import AuthService
from services.otp_service import OtpService

router = APIRouter(
    prefix="/auth", tags=["auth"], responses=error_responses(400, 401, 404, 409, 502)
)


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse
)
async def signup(
    body: SignupRequest,
    auth: AuthService = Depends(get_auth_service),
) -> SignupResponse:
    user = await auth.signup(body.email, body.password, body.name)
    return SignupResponse(
        message="User created successfully. Please verify your email.",
        user=UserSummaryResponse.from_summary(user),
    )


@router.post("/send-otp", response_model=MessageResponse)
async def send_otp(
    body: SendOtpRequest,
    otp: OtpService = Depends(get_otp_service),
) -> MessageResponse:
    await otp.send_otp(body.email)
    return MessageResponse(message="OTP sent successfully")


@router.post("/verify-otp", response_model=AuthResponse)
async def verify_otp(
    body: VerifyOtpRequest,
    otp: OtpService = Depends(get_otp_service),
) -> AuthResponse:
    session = await otp.verify_otp(body.email, body.otp)
    return AuthResponse.from_session("Email verified successfully", session)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    session = await auth.login(body.email, body.password)
    return AuthResponse.from_session("Login successful", session)


@router.post("/google", response_model=AuthResponse)
async def google_login(
    body: GoogleLoginRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    session = await auth.federated_login(body.credential)
    return AuthResponse.from_session("Google authentication successful", session)
