# academy/api/v1/router.py
from fastapi import APIRouter
from academy.api.v1 import (
    admin,
    auth,
    checkout,
    classes,
    enrollments,
    events,
    mentors,
    notifications,
    parent_child,
    registrations,
    user,
)

api_router = APIRouter()

api_router.include_router(auth.router,          tags=["auth"])
api_router.include_router(classes.router,       prefix="/classes",             tags=["classes"])
api_router.include_router(events.router,        prefix="/events",              tags=["events"])
api_router.include_router(enrollments.router,   prefix="/enrollments",         tags=["enrollments"])
api_router.include_router(registrations.router, prefix="/event-registrations", tags=["events"])
api_router.include_router(user.router,          prefix="/user",                tags=["user"])
api_router.include_router(checkout.router,      tags=["checkout"])
api_router.include_router(parent_child.router,  tags=["parent-child"])
api_router.include_router(admin.router,         prefix="/admin",               tags=["admin"])
api_router.include_router(mentors.router,       prefix="/mentors",             tags=["mentors"])
api_router.include_router(notifications.router, tags=["notifications"])
