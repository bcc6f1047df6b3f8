"""Short code generation utilities."""

import secrets
import string

from .errors import CodeGenerationError


# Base62 characters (alphanumeric, case-sensitive)
BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

SHORT_CODE_LENGTH = 6


class ShortCodeGenerator:
    """Generate random short codes for URLs.
    
    Codes are SHORT_CODE_LENGTH characters drawn uniformly from BASE62_CHARS
    (62**6, about 56.8 billion codes). Uniqueness is not guaranteed here;
    callers check the store and retry.
    """
    
    BASE62_CHARS = BASE62_CHARS
    
    def __init__(self, length: int = SHORT_CODE_LENGTH):
        """Initialize short code generator.
        
        Args:
            length: Length of generated codes
        """
        self.length = length
    
    def generate(self) -> str:
        """Generate a random short code.
        
        Returns:
            Random short code
            
        Raises:
            CodeGenerationError: If the OS random source is unavailable
        """
        try:
            return ''.join(secrets.choice(self.BASE62_CHARS) for _ in range(self.length))
        except (OSError, NotImplementedError) as e:
            raise CodeGenerationError(f"Random source unavailable: {e}") from e
    
    def is_valid_format(self, code: str) -> bool:
        """Check if code could have been produced by this generator.
        
        Args:
            code: Code to validate
            
        Returns:
            True if code has the generator's length and alphabet
        """
        return len(code) == self.length and all(c in self.BASE62_CHARS for c in code)
