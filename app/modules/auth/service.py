from datetime import timedelta
import logging
from fastapi import HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from app.modules.auth.models import User
from app.modules.auth.schemas import UserCreate, UserLogin, UserOut, TokenResponse
from app.modules.auth.utils import hash_password, verify_password, create_access_token
from app.core.config import Settings

logger = logging.getLogger(__name__)

# Mismo mensaje para "usuario inexistente" y "contraseña incorrecta"
INVALID_CREDENTIALS = "Invalid email or password"


class AuthService:
    """
    Servicio de autenticación: registro, login y emisión de tokens.
    """

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def _issue_token(self, user: User) -> TokenResponse:
        token = create_access_token(
            user_id=str(user.id),
            secret_key=self.settings.APP_SECRET_STRING,
            algorithm=self.settings.ALGORITHM,
            expires_delta=timedelta(days=self.settings.ACCESS_TOKEN_EXPIRE_DAYS)
        )
        return TokenResponse(token=token, user=UserOut.model_validate(user))

    def signup(self, user_data: UserCreate) -> TokenResponse:
        """
        Crear usuario y emitir token.

        Raises:
            HTTPException 400: si el email ya está registrado
        """
        existing_user = self.db.query(User).filter(User.email == user_data.email).first()
        if existing_user:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        user = User(
            email=user_data.email,
            password=hash_password(user_data.password),
            name=user_data.name,
            currency=user_data.currency
        )
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        logger.info(f"User registered: {user.id}")
        return self._issue_token(user)

    def login(self, credentials: UserLogin) -> TokenResponse:
        """Verificar credenciales y emitir token."""
        user = self.db.query(User).filter(User.email == credentials.email).first()
        if not user or not verify_password(credentials.password, user.password):
            logger.info("Rejected login attempt")
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=INVALID_CREDENTIALS
            )

        return self._issue_token(user)
