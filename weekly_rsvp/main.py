from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from weekly_rsvp.database.db import Base, engine
from weekly_rsvp.routes import events, reservations

app = FastAPI(title="Weekly RSVP")

# Configure CORS
origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create all tables (in production, use migrations such as Alembic)
Base.metadata.create_all(bind=engine)

# Include the routers
app.include_router(events.router)
app.include_router(reservations.router)
