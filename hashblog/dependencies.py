from fastapi import Depends

from hashblog.db.couchdb import get_couch
from hashblog.repos.kv_store import CouchKVStore
from hashblog.repos.posts_repo import PostsRepo
from hashblog.services.posts_service import PostsService


def get_kv_store(couch=Depends(get_couch)):
    return CouchKVStore(couch)


def get_posts_repo(store=Depends(get_kv_store)):
    return PostsRepo(store)


def get_posts_service(repo=Depends(get_posts_repo)):
    return PostsService(repo=repo)
