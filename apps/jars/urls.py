from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'jars'

# Router for ViewSets
router = DefaultRouter()
router.register(r'jars', views.JarViewSet, basename='jar')

urlpatterns = [
    # Jar ViewSet routes
    # GET    /api/jars/                        - List user's jars
    # POST   /api/jars/                        - Create jar
    # GET    /api/jars/{id}/                   - Jar page (members only)

    # Custom jar actions
    # GET    /api/jars/lookup/?invite_code=    - Preview jar by invite code
    # POST   /api/jars/join/                   - Join with invite code
    # GET    /api/jars/{id}/members/           - List members
    # GET    /api/jars/{id}/balances/          - Outstanding totals per member
    # GET    /api/jars/{id}/activity/          - Recent offenses
    # GET    /api/jars/{id}/offense_types/     - Offense type catalog
    # POST   /api/jars/{id}/offense_types/     - Add offense type (admin)
    # GET    /api/jars/{id}/offenses/          - List offenses
    # POST   /api/jars/{id}/offenses/          - Report offense

    # Include router URLs
    path('', include(router.urls)),
]
