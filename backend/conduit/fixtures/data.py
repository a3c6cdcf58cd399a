from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserFixture:
    username: str
    email: str
    password: str
    bio: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class ArticleFixture:
    slug: str
    title: str
    description: str
    body: str
    author_username: str
    tag_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class CommentFixture:
    body: str
    author_username: str
    article_slug: str


@dataclass(frozen=True)
class Fixtures:
    users: tuple[UserFixture, ...] = ()
    tags: tuple[str, ...] = ()
    articles: tuple[ArticleFixture, ...] = ()
    comments: tuple[CommentFixture, ...] = ()
    # (follower, followee) username pairs
    follows: tuple[tuple[str, str], ...] = ()
    # (username, favorited slugs) pairs
    favorites: tuple[tuple[str, tuple[str, ...]], ...] = ()


def _avatar(username: str) -> str:
    return f"https://i.pravatar.cc/200?u={username}"


USERS: tuple[UserFixture, ...] = (
    UserFixture(
        username="johndoe",
        email="john@example.com",
        password="password123",
        bio="I am a software developer interested in web technologies.",
        image=_avatar("johndoe"),
    ),
    UserFixture(
        username="janedoe",
        email="jane@example.com",
        password="password123",
        bio="Full-stack developer with a passion for UI/UX.",
        image=_avatar("janedoe"),
    ),
)

TAGS: tuple[str, ...] = ("javascript", "typescript", "aws", "web-security", "waf")

ARTICLES: tuple[ArticleFixture, ...] = (
    ArticleFixture(
        slug="introduction-to-aws-waf",
        title="Introduction to AWS WAF",
        description="Learn the basics of AWS Web Application Firewall",
        body=(
            "AWS WAF (Web Application Firewall) is a web application firewall service that helps "
            "protect your web applications from common web exploits that could affect application "
            "availability, compromise security, or consume excessive resources.\n"
            "\n"
            "AWS WAF gives you control over how traffic reaches your applications by enabling you "
            "to create security rules that block common attack patterns, such as SQL injection or "
            "cross-site scripting, and rules that filter out specific traffic patterns you define.\n"
            "\n"
            "In this article, we'll explore the basics of AWS WAF and how it can help secure your "
            "web applications."
        ),
        author_username="johndoe",
        tag_names=("aws", "web-security", "waf"),
    ),
    ArticleFixture(
        slug="implementing-aws-waf-with-cloudfront",
        title="Implementing AWS WAF with CloudFront",
        description="A step-by-step guide to implementing AWS WAF with CloudFront",
        body=(
            "CloudFront is Amazon's Content Delivery Network (CDN) that securely delivers data, "
            "videos, applications, and APIs to customers globally with low latency and high "
            "transfer speeds. When combined with AWS WAF, it provides an additional layer of "
            "security for your web applications.\n"
            "\n"
            "In this tutorial, we'll walk through the process of implementing AWS WAF with "
            "CloudFront to protect your web applications from common security threats.\n"
            "\n"
            "We'll cover:\n"
            "1. Setting up a CloudFront distribution\n"
            "2. Creating AWS WAF rules\n"
            "3. Associating the WAF WebACL with CloudFront\n"
            "4. Testing the configuration"
        ),
        author_username="johndoe",
        tag_names=("aws", "web-security", "waf"),
    ),
    ArticleFixture(
        slug="typescript-best-practices",
        title="TypeScript Best Practices",
        description="Learn the best practices for TypeScript development",
        body=(
            "TypeScript has become increasingly popular in the JavaScript ecosystem, offering "
            "strong typing and object-oriented features that make code more maintainable and less "
            "prone to runtime errors.\n"
            "\n"
            "In this article, we'll explore some best practices for TypeScript development that "
            "can help you write cleaner, more efficient code.\n"
            "\n"
            "Topics covered include:\n"
            "- Type annotations and inference\n"
            "- Interface vs Type aliases\n"
            "- Generics\n"
            "- Utility types\n"
            "- Error handling\n"
            "- Async/await patterns"
        ),
        author_username="janedoe",
        tag_names=("javascript", "typescript"),
    ),
)

COMMENTS: tuple[CommentFixture, ...] = (
    CommentFixture(
        body="Great introduction to AWS WAF! This will be very helpful for my upcoming project.",
        author_username="janedoe",
        article_slug="introduction-to-aws-waf",
    ),
    CommentFixture(
        body=(
            "Thanks for the detailed guide on implementing WAF with CloudFront. "
            "I was able to follow along and set it up for my application."
        ),
        author_username="janedoe",
        article_slug="implementing-aws-waf-with-cloudfront",
    ),
    CommentFixture(
        body="I appreciate the TypeScript best practices. The section on generics was particularly helpful.",
        author_username="johndoe",
        article_slug="typescript-best-practices",
    ),
)

FOLLOWS: tuple[tuple[str, str], ...] = (("janedoe", "johndoe"),)

FAVORITES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("janedoe", ("introduction-to-aws-waf", "implementing-aws-waf-with-cloudfront")),
    ("johndoe", ("typescript-best-practices",)),
)

DEFAULT_FIXTURES = Fixtures(
    users=USERS,
    tags=TAGS,
    articles=ARTICLES,
    comments=COMMENTS,
    follows=FOLLOWS,
    favorites=FAVORITES,
)
