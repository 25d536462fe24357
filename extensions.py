from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
import redis
import json
import logging

db = SQLAlchemy()
jwt = JWTManager()
# flask db init / flask db migrate -m "..." / flask db upgrade
migrate = Migrate()

logger = logging.getLogger(__name__)

# Redis cache; every helper below is a no-op while this is None
redis_client = None
key_prefix = 'pipeline'
default_ttl = 300


def _connect(config):
    if config.get('REDIS_URL'):
        return redis.Redis.from_url(
            config['REDIS_URL'],
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5
        )
    return redis.Redis(
        host=config['REDIS_HOST'],
        port=config['REDIS_PORT'],
        db=config['REDIS_DB'],
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5
    )


def init_redis(app):
    """Connect the cache, or leave it disabled when Redis is off or unreachable"""
    global redis_client, key_prefix, default_ttl
    key_prefix = app.config.get('CACHE_KEY_PREFIX', 'pipeline')
    default_ttl = app.config.get('CACHE_TTL', 300)
    redis_client = None

    if not app.config.get('REDIS_ENABLED'):
        logger.info("Redis disabled, caching off")
        return

    try:
        client = _connect(app.config)
        client.ping()
    except redis.RedisError as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without caching")
        return

    redis_client = client
    logger.info("Redis connected")


def _key(key):
    return f"{key_prefix}:{key}"


def cache_set(key, value, expire=None):
    if redis_client is None:
        return False
    try:
        redis_client.setex(_key(key), expire or default_ttl, json.dumps(value))
    except redis.RedisError as e:
        logger.warning(f"Cache set failed for {key}: {e}")
        return False
    return True


def cache_get(key):
    if redis_client is None:
        return None
    try:
        raw = redis_client.get(_key(key))
    except redis.RedisError as e:
        logger.warning(f"Cache get failed for {key}: {e}")
        return None
    return json.loads(raw) if raw else None


def cache_delete(key):
    if redis_client is None:
        return False
    try:
        redis_client.delete(_key(key))
    except redis.RedisError as e:
        logger.warning(f"Cache delete failed for {key}: {e}")
        return False
    return True


def cache_delete_pattern(pattern):
    """Delete every key matching a glob pattern (SCAN, never KEYS)"""
    if redis_client is None:
        return False
    try:
        keys = list(redis_client.scan_iter(match=_key(pattern)))
        if keys:
            redis_client.delete(*keys)
    except redis.RedisError as e:
        logger.warning(f"Cache delete pattern failed for {pattern}: {e}")
        return False
    return True
