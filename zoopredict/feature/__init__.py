from .feature import (BaseFeature,
                      BaseImageFeature,
                      ColorOrder,
                      ImageShape,
                      Preprocessing,
                      check_image_shape,
                      load_image)
