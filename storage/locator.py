"""
Bucket Locator

스토리지 URL(scheme://container[/path]) 파싱 및 렌더링
"""

from dataclasses import dataclass

from errors import ConfigurationError

SCHEME_DELIMITER = "://"

# 컨테이너 없이 절대 경로만 갖는 스킴 (file:///tmp/artifacts)
PATH_ONLY_SCHEMES = {"file"}


@dataclass(frozen=True)
class BucketLocator:
    """파싱된 버킷/오브젝트 주소"""
    scheme: str
    container: str
    object_path: str = ""

    def __post_init__(self):
        if not self.scheme or SCHEME_DELIMITER in self.scheme:
            raise ConfigurationError(f"invalid storage scheme {self.scheme!r}")
        if not self.container and self.scheme in PATH_ONLY_SCHEMES:
            return
        if not self.container or SCHEME_DELIMITER in self.container or "/" in self.container:
            raise ConfigurationError(f"invalid bucket name {self.container!r}")

    @classmethod
    def parse(cls, url: str) -> "BucketLocator":
        """
        URL 파싱

        Args:
            url: scheme://container[/path] 형식 URL

        Returns:
            BucketLocator
        """
        if not url or SCHEME_DELIMITER not in url:
            raise ConfigurationError(
                f"failed to parse bucket name from {url!r}",
                context={"bucket_url": url},
            )
        scheme, rest = url.split(SCHEME_DELIMITER, 1)
        container, _, path = rest.partition("/")
        return cls(
            scheme=scheme.lower(),
            container=container,
            object_path=path.strip("/"),
        )

    @property
    def root(self) -> str:
        """scheme://container"""
        return f"{self.scheme}{SCHEME_DELIMITER}{self.container}"

    @property
    def url(self) -> str:
        if self.object_path:
            return f"{self.root}/{self.object_path}"
        return self.root

    def key_for(self, name: str) -> str:
        """버킷 경로 접두사 아래의 오브젝트 키"""
        name = name.lstrip("/")
        if self.object_path:
            return f"{self.object_path}/{name}"
        return name

    def join(self, name: str) -> "BucketLocator":
        return BucketLocator(self.scheme, self.container, self.key_for(name))

    def __str__(self) -> str:
        return self.url
