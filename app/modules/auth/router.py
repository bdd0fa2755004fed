from fastapi import APIRouter, Depends, status
from app.core.config import Settings, get_settings
from app.modules.auth.service import AuthService
from app.modules.auth.schemas import UserCreate, UserLogin, UserOut, TokenResponse
from app.dependencies.dbDependecies import db_dependency
from app.dependencies.userDependencies import user_dependency

auth_router = APIRouter()


@auth_router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(user: UserCreate, db: db_dependency, settings: Settings = Depends(get_settings)):
    """
    Register a new user and return a session token.
    """
    return AuthService(db, settings).signup(user)


@auth_router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
def login(credentials: UserLogin, db: db_dependency, settings: Settings = Depends(get_settings)):
    """
    Endpoint for user login.
    """
    return AuthService(db, settings).login(credentials)


@auth_router.get("/me", response_model=UserOut)
def get_me(current_user: user_dependency):
    """
    Endpoint to get the current authenticated user.
    """
    return current_user
