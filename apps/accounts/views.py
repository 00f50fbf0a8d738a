import logging

from django.conf import settings
from django.http import HttpResponseRedirect
from drf_spectacular.utils import extend_schema, OpenApiParameter
from rest_framework import status, serializers
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken

from .serializers import UserSerializer, GoogleTokenLoginSerializer
from .services import (
    AccountsServiceError,
    IdentityProviderError,
    InactiveAccountError,
    GoogleIdentityClient,
    generate_state,
    sign_in_with_identity,
)
from .tokens import set_session_cookie, clear_session_cookie

logger = logging.getLogger(__name__)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    created = serializers.BooleanField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def get_identity_client():
    return GoogleIdentityClient()


@extend_schema(
    responses={302: None},
    description="Start the Google OAuth flow. Sets a short-lived state cookie and redirects to Google.",
    tags=['auth'],
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def google_login(request):
    """Redirect the browser to Google's consent screen."""
    state = generate_state()
    response = HttpResponseRedirect(get_identity_client().build_authorization_url(state))
    response.set_cookie(
        settings.TIPJAR_OAUTH_STATE_COOKIE,
        state,
        max_age=settings.TIPJAR_OAUTH_STATE_MAX_AGE,
        path='/',
        secure=settings.SESSION_COOKIE_SECURE,
        httponly=True,
        samesite='Lax',
    )
    return response


@extend_schema(
    parameters=[
        OpenApiParameter('state', str, description='State echoed back by Google'),
        OpenApiParameter('code', str, description='Authorization code'),
    ],
    responses={
        302: None,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        502: ErrorResponseSerializer,
    },
    description="OAuth callback. Verifies state, exchanges the code, signs the user in and sets the session cookie.",
    tags=['auth'],
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def google_callback(request):
    """Complete the Google OAuth flow."""
    expected_state = request.COOKIES.get(settings.TIPJAR_OAUTH_STATE_COOKIE)
    if not expected_state:
        return Response({'error': 'Missing state cookie'}, status=status.HTTP_400_BAD_REQUEST)

    if request.query_params.get('state') != expected_state:
        return Response({'error': 'Invalid state parameter'}, status=status.HTTP_400_BAD_REQUEST)

    code = request.query_params.get('code')
    if not code:
        error_code = request.query_params.get('error')
        if error_code:
            description = request.query_params.get('error_description', '')
            return Response(
                {'error': f'OAuth error: {error_code} - {description}'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response({'error': 'Missing authorization code'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        identity = get_identity_client().exchange_code(code)
        user, created = sign_in_with_identity(identity=identity)
    except IdentityProviderError as e:
        return Response({'error': str(e)}, status=status.HTTP_502_BAD_GATEWAY)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except AccountsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    logger.info("User %s authenticated via Google (created=%s)", user.id, created)

    response = HttpResponseRedirect(settings.LOGIN_REDIRECT_URL)
    response.delete_cookie(settings.TIPJAR_OAUTH_STATE_COOKIE, path='/', samesite='Lax')
    return set_session_cookie(response, user)


@extend_schema(
    request=None,
    responses={302: None},
    description="Clear the session cookie and redirect to the login page.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def logout(request):
    """Logout by clearing the session cookie."""
    return clear_session_cookie(HttpResponseRedirect(settings.LOGIN_URL))


@extend_schema(
    request=GoogleTokenLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Sign in with a Google ID token. Returns JWT tokens and sets the session cookie.",
    tags=['auth'],
)
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def google_token_login(request):
    """Sign in with a Google ID token obtained by the client."""
    serializer = GoogleTokenLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        identity = get_identity_client().verify_id_token(serializer.validated_data['id_token'])
        user, created = sign_in_with_identity(identity=identity)
    except IdentityProviderError as e:
        return Response({'error': str(e)}, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except AccountsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    refresh = RefreshToken.for_user(user)

    response = Response({
        'message': 'Login successful',
        'created': created,
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    })
    return set_session_cookie(response, user)


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)
