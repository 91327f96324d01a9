from django.urls import path

from trip_cost import views

urlpatterns = [
    path("health", views.health_view, name="health"),
    path("optimize-route", views.optimize_route_view, name="optimize-route"),
    path("fuel-price", views.fuel_price_view, name="fuel-price"),
    path("get-mpg", views.get_mpg_view, name="get-mpg"),
    path("vehicle-years", views.vehicle_years_view, name="vehicle-years"),
    path("vehicle-makes", views.vehicle_makes_view, name="vehicle-makes"),
    path("vehicle-models", views.vehicle_models_view, name="vehicle-models"),
]
