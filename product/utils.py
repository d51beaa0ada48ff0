from django.utils.text import slugify


def generate_slug(text):
    return slugify(text)


def generate_unique_slug(base_slug, existing_slugs):
    """
    Return base_slug if it is free, else the first free base_slug-1,
    base_slug-2, ... against existing_slugs.
    """
    taken = set(existing_slugs)
    slug = base_slug
    counter = 1
    while slug in taken:
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug
