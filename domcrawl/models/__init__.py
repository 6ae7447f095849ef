# Models package — re-export all models.
# Prefer importing from the specific submodule (e.g. domcrawl.models.page).

from domcrawl.models.http import (
    Cookie as Cookie,
    InterceptedRequest as InterceptedRequest,
    Resource as Resource,
    merge_cookies as merge_cookies,
)
from domcrawl.models.page import (
    Form as Form,
    Link as Link,
    Page as Page,
)
