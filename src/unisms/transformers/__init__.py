from unisms.transformers import (  # noqa: F401  registers every vendor
    aliyun,
    cl253,
    huawei,
    juhe,
    luosimao,
    smsbao,
    submail,
    tencent,
    ucp,
    volc,
    yunpian,
    yuntongxun,
)
from unisms.transformers.base import BaseTransformer, Transformer

__all__ = ["BaseTransformer", "Transformer"]
