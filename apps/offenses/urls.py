from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'offenses'

# Router for ViewSets
router = SimpleRouter()
router.register(r'offense-types', views.OffenseTypeViewSet, basename='offense-type')
router.register(r'offenses', views.OffenseViewSet, basename='offense')
router.register(r'payments', views.PaymentViewSet, basename='payment')

urlpatterns = [
    # PUT    /api/offense-types/{id}/              - Replace offense type (admin)
    # POST   /api/offense-types/{id}/activate/     - Activate (admin)
    # POST   /api/offense-types/{id}/deactivate/   - Deactivate (admin)
    # GET    /api/offenses/pending/                - Current user's pending offenses
    # GET    /api/offenses/{id}/                   - Resolved offense detail
    # POST   /api/offenses/{id}/pay/               - Record payment
    # POST   /api/offenses/{id}/status/            - Change status (admin)
    # POST   /api/payments/{id}/verify/            - Verify payment (admin)

    # Include router URLs
    path('', include(router.urls)),
]
