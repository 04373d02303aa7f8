from fastapi import APIRouter, Depends
from api.utils.authentication import get_current_user
from api.v1.routes.followers import followers
from api.v1.routes.users import users
from api.v1.routes.quiz import quiz

# every route below sits behind the bearer token gate
api_version_one = APIRouter(prefix="/api/v1", dependencies=[Depends(get_current_user)])

api_version_one.include_router(followers)
api_version_one.include_router(users)
api_version_one.include_router(quiz)
