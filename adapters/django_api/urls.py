"""
MERIT Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


urlpatterns = [
    path("partners/register", views.partners_register_view),
    path("partners/<str:tag>", views.partner_detail_view),
    path("gatherings/create", views.gatherings_create_view),
    path("gatherings/<int:gathering_id>", views.gathering_detail_view),
    path("gatherings/<int:gathering_id>/roster", views.gathering_roster_view),
    path("gatherings/<int:gathering_id>/join", views.gathering_join_view),
    path("merits/claim", views.merits_claim_view),
    path("merits/<str:owner>", views.merits_detail_view),
    path("proofs/<str:owner>", views.proofs_detail_view),
]
