"""Request payload schemas."""
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

GAME_MODES = ('anagram', 'word_ladder', 'speed_type')


class GameResultIn(BaseModel):
    """Body of ``POST /api/game/score`` (camelCase on the wire)."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    game_mode: Literal['anagram', 'word_ladder', 'speed_type'] = Field(..., alias='gameMode')
    score: int = Field(..., ge=0)
    words_correct: int = Field(..., ge=0, alias='wordsCorrect')
    total_words: int = Field(..., ge=0, alias='totalWords')
    average_time: Optional[int] = Field(None, ge=0, alias='averageTime')
    longest_streak: int = Field(0, ge=0, alias='longestStreak')
    game_data: Optional[Dict[str, Any]] = Field(None, alias='gameData')

    @model_validator(mode='after')
    def _correct_within_total(self):
        if self.words_correct > self.total_words:
            raise ValueError('wordsCorrect cannot exceed totalWords')
        return self


class RegisterIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6)
    confirm_password: Optional[str] = Field(None, alias='confirmPassword')
    email: Optional[str] = None
    first_name: Optional[str] = Field(None, alias='firstName')
    last_name: Optional[str] = Field(None, alias='lastName')

    @model_validator(mode='after')
    def _passwords_match(self):
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords don't match")
        return self


class LoginIn(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
