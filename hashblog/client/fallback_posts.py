from hashblog.schemas.blog import PostDetail

FALLBACK_POSTS = [
    PostDetail(
        id="1",
        title="Building Scalable Systems",
        date="2025-12-10",
        author="Yuan Wang",
        excerpt="Thoughts on designing distributed systems that can handle millions of requests per second.",
        readTime="5 min read",
        tags=["systems", "architecture"],
        category="Engineering",
        content="""Scaling to millions of requests per second starts with a few boring decisions made early.

## Scale out, not up

Design every service so that another instance can be added behind the load balancer:

- **Cost**: commodity machines are cheaper than one big server
- **Fault tolerance**: losing one node is routine, not an outage
- **Elasticity**: capacity follows demand

## Load balancing

```python
class LoadBalancer:
    def __init__(self, servers):
        self.servers = servers
        self.current_index = 0

    def get_next_server(self):
        server = self.servers[self.current_index]
        self.current_index = (self.current_index + 1) % len(self.servers)
        return server
```

Production balancers also weigh health, load and locality.

## Caching and databases

Cache what is read often and changes rarely, always with a TTL. For the
database, reach for read replicas, then sharding, then CQRS.
""",
    ),
    PostDetail(
        id="2",
        title="The Art of Code Review",
        date="2025-12-05",
        author="Yuan Wang",
        excerpt="How to give and receive code reviews that make the whole team better.",
        readTime="4 min read",
        tags=["development", "team"],
        category="Best Practices",
        content="""A good review is a conversation about the code, never about the author.

## As a reviewer

1. Read the description before the diff
2. Ask questions instead of issuing orders
3. Separate blocking issues from nitpicks

## As an author

Keep changes small, explain the why in the description, and review your own
diff once before asking anyone else to.
""",
    ),
    PostDetail(
        id="3",
        title="Why TypeScript Matters",
        date="2025-11-28",
        author="Yuan Wang",
        excerpt="Static types catch whole classes of bugs before they reach production.",
        readTime="6 min read",
        tags=["typescript", "javascript"],
        category="Programming Languages",
        content="""Types are documentation the compiler checks for you.

```typescript
type Result<T> = { ok: true; value: T } | { ok: false; error: string };

function fetchUser(id: string): Result<User> {
  // ...
}
```

Discriminated unions like `Result` force every caller to handle the failure
branch, which is exactly where untyped code tends to break.
""",
    ),
    PostDetail(
        id="4",
        title="Optimizing Database Queries",
        date="2025-11-20",
        author="Yuan Wang",
        excerpt="Practical techniques for finding and fixing slow queries.",
        readTime="7 min read",
        tags=["database", "performance"],
        category="Performance",
        content="""Most slow pages are one slow query away from being fast.

## Measure first

Run `EXPLAIN ANALYZE` before changing anything:

```sql
EXPLAIN ANALYZE
SELECT * FROM orders WHERE customer_id = 42 ORDER BY created_at DESC;
```

## Then fix

- Add composite indexes that match the filter and sort order
- Select only the columns you need
- Batch N+1 lookups into a single `IN` query
""",
    ),
]
